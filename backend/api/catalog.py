"""Catalogue endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from backend.api.errors import http_error, not_found
from backend.schemas.catalog import ProductCreate, ProductList, ProductOut, ProductUpdate
from core import product_service

router = APIRouter(prefix="/catalog", tags=["catalogue"])


def _validation_error(exc: product_service.ProductValidationError):
    return http_error(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Champs produit invalides.",
        exc.fields,
    )


def _duplicate_barcode(exc: product_service.DuplicateBarcodeError):
    return http_error(
        status.HTTP_409_CONFLICT,
        "duplicate_barcode",
        str(exc),
        {exc.field: [str(exc)]},
    )


@router.get("/products", response_model=ProductList)
def list_products(search: str | None = None):
    items = product_service.list_products(search=search)
    return {"items": items, "total": len(items)}


@router.get("/products/barcode/{barcode}", response_model=ProductOut)
def get_product_by_barcode(barcode: str):
    try:
        return product_service.get_product_by_barcode(barcode)
    except product_service.ProductNotFoundError as exc:
        raise not_found(str(exc)) from exc


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str):
    try:
        return product_service.get_product(product_id)
    except product_service.ProductNotFoundError as exc:
        raise not_found(str(exc)) from exc


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate):
    try:
        return product_service.add_product(payload.model_dump())
    except product_service.ProductValidationError as exc:
        raise _validation_error(exc) from exc
    except product_service.DuplicateBarcodeError as exc:
        raise _duplicate_barcode(exc) from exc


@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: str, payload: ProductUpdate):
    try:
        return product_service.update_product(product_id, payload.model_dump(exclude_none=True))
    except product_service.ProductNotFoundError as exc:
        raise not_found(str(exc)) from exc
    except product_service.ProductValidationError as exc:
        raise _validation_error(exc) from exc
    except product_service.DuplicateBarcodeError as exc:
        raise _duplicate_barcode(exc) from exc


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: str):
    try:
        product_service.delete_product(product_id)
    except product_service.ProductNotFoundError as exc:
        raise not_found(str(exc)) from exc
    except product_service.ProductInUseError as exc:
        raise http_error(status.HTTP_409_CONFLICT, "product_in_use", str(exc)) from exc
