"""Schemas for sale endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SaleLineIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., min_length=1, alias="productId")
    product_name: str = Field("", alias="productName")
    quantity: int = Field(..., gt=0)
    sale_price: float = Field(..., gt=0, alias="salePrice")


class SaleCreate(BaseModel):
    items: List[SaleLineIn] = Field(..., min_length=1)
    total: float = Field(..., ge=0)


class SaleCreated(BaseModel):
    id: str


class SaleItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: str
    product_name: str
    quantity: int
    sale_price: float
    subtotal: float


class SaleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: datetime
    total: float
    items: List[SaleItemOut]


class SaleList(BaseModel):
    items: List[SaleOut]
    total: int


__all__ = ["SaleLineIn", "SaleCreate", "SaleCreated", "SaleItemOut", "SaleOut", "SaleList"]
