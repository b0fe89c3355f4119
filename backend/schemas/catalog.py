"""Schemas for catalogue endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    barcode: str = Field(..., min_length=1, max_length=64)
    purchase_price: float = Field(..., gt=0, alias="purchasePrice")
    sale_price: float = Field(..., gt=0, alias="salePrice")
    stock: int = Field(0, ge=0)

    @field_validator("name", "barcode", mode="before")
    def _strip_text(cls, value):
        if value is None:
            return value
        return str(value).strip()


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    barcode: Optional[str] = Field(default=None, min_length=1, max_length=64)
    purchase_price: Optional[float] = Field(default=None, gt=0, alias="purchasePrice")
    sale_price: Optional[float] = Field(default=None, gt=0, alias="salePrice")
    stock: Optional[int] = Field(default=None, ge=0)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    barcode: str
    purchase_price: float
    sale_price: float
    stock: int


class ProductList(BaseModel):
    items: List[ProductOut]
    total: int


__all__ = ["ProductCreate", "ProductUpdate", "ProductOut", "ProductList"]
