"""Sale endpoints (record, list, delete)."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from backend.api.errors import http_error, not_found
from backend.schemas.sales import SaleCreate, SaleCreated, SaleList, SaleOut
from backend.services import sales as sales_service
from core import inventory_ledger
from core.models import Sale

router = APIRouter(prefix="/sales", tags=["ventes"])


def _sale_payload(sale: Sale) -> dict[str, object]:
    return {
        "id": sale.id,
        "date": sale.date,
        "total": sale.total,
        "items": [
            {
                "product_id": item.product_id,
                "product_name": item.product_name,
                "quantity": item.quantity,
                "sale_price": item.sale_price,
                "subtotal": item.subtotal,
            }
            for item in sale.items
        ],
    }


@router.get("", response_model=SaleList)
def list_sales():
    items = [_sale_payload(sale) for sale in sales_service.get_sales()]
    return {"items": items, "total": len(items)}


@router.get("/{sale_id}", response_model=SaleOut)
def get_sale(sale_id: str):
    try:
        return _sale_payload(sales_service.get_sale(sale_id))
    except inventory_ledger.SaleNotFoundError as exc:
        raise not_found(str(exc)) from exc


@router.post("", response_model=SaleCreated, status_code=status.HTTP_201_CREATED)
def create_sale(payload: SaleCreate):
    try:
        sale_id = inventory_ledger.record_sale(
            [line.model_dump() for line in payload.items],
            payload.total,
        )
    except inventory_ledger.SaleValidationError as exc:
        raise http_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "validation_error",
            str(exc),
            exc.fields,
        ) from exc
    except inventory_ledger.InsufficientStockError as exc:
        raise http_error(status.HTTP_409_CONFLICT, "insufficient_stock", str(exc)) from exc
    except inventory_ledger.LedgerError as exc:
        raise http_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "ledger_error",
            "La vente n'a pas pu être enregistrée.",
        ) from exc
    return SaleCreated(id=sale_id)


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_sale(sale_id: str):
    try:
        inventory_ledger.delete_sale(sale_id)
    except inventory_ledger.SaleNotFoundError as exc:
        raise not_found(str(exc)) from exc
    except inventory_ledger.LedgerError as exc:
        raise http_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "ledger_error",
            "La vente n'a pas pu être supprimée.",
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
