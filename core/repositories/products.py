"""
Product Repository - Data access for the products table.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from sqlalchemy.engine import Connection

from core.models import Product
from core.schema import products

from .base import TableGateway


class SqlProductRepository:
    """SQLAlchemy implementation of the product repository."""

    def __init__(self, connection: Connection):
        self._rows = TableGateway(connection, products)

    def get(self, product_id: str) -> Product | None:
        row = self._rows.get_row(product_id)
        return Product.from_row(row) if row else None

    def list_all(self) -> Sequence[Product]:
        rows = self._rows.select_rows(order_by=[products.c.name.asc(), products.c.id.asc()])
        return [Product.from_row(row) for row in rows]

    def find_by_barcode(self, barcode: str) -> Product | None:
        rows = self._rows.select_rows(products.c.barcode == barcode)
        return Product.from_row(rows[0]) if rows else None

    def count(self) -> int:
        return len(self._rows.select_rows())

    def add(self, product: Product) -> Product:
        self._rows.insert_row(_product_values(product))
        return product

    def update(self, product_id: str, values: Mapping[str, Any]) -> bool:
        return self._rows.update_row(product_id, dict(values)) > 0

    def delete(self, product_id: str) -> bool:
        return self._rows.delete_rows(products.c.id == product_id) > 0

    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Retire ``quantity`` du stock si (et seulement si) il en reste assez."""
        updated = self._rows.update_row(
            product_id,
            {"stock": products.c.stock - quantity},
            products.c.stock >= quantity,
        )
        return updated > 0

    def increment_stock(self, product_id: str, quantity: int) -> bool:
        return self._rows.update_row(product_id, {"stock": products.c.stock + quantity}) > 0


def _product_values(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "barcode": product.barcode,
        "purchase_price": float(product.purchase_price),
        "sale_price": float(product.sale_price),
        "stock": int(product.stock),
    }


__all__ = ["SqlProductRepository"]
