"""
Sale Repository - Data access for the sales and sale_items tables.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.engine import Connection

from core.models import Sale, SaleItem, SaleLine, format_timestamp, parse_timestamp
from core.schema import sale_items, sales

from .base import TableGateway


class SqlSaleRepository:
    """SQLAlchemy implementation of the sale repository (sales + lines)."""

    def __init__(self, connection: Connection):
        self._sales = TableGateway(connection, sales)
        self._items = TableGateway(connection, sale_items)

    def add(self, sale: Sale) -> Sale:
        self._sales.insert_row(
            {"id": sale.id, "date": format_timestamp(sale.date), "total": float(sale.total)}
        )
        return sale

    def add_item(self, sale_id: str, line: SaleLine) -> SaleItem:
        self._items.insert_row(
            {
                "sale_id": sale_id,
                "product_id": line.product_id,
                "product_name": line.product_name,
                "quantity": int(line.quantity),
                "sale_price": float(line.sale_price),
            }
        )
        return SaleItem(
            sale_id=sale_id,
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=int(line.quantity),
            sale_price=float(line.sale_price),
        )

    def get(self, sale_id: str) -> Sale | None:
        row = self._sales.get_row(sale_id)
        if row is None:
            return None
        return _to_sale(row, self.items_for(sale_id))

    def exists(self, sale_id: str) -> bool:
        return self._sales.get_row(sale_id) is not None

    def items_for(self, sale_id: str) -> list[SaleItem]:
        rows = self._items.select_rows(sale_items.c.sale_id == sale_id, order_by=[sale_items.c.id.asc()])
        return [SaleItem.from_row(row) for row in rows]

    def list_all(self) -> Sequence[Sale]:
        """Toutes les ventes, les plus récentes d'abord, avec leurs lignes."""
        sale_rows = self._sales.select_rows(order_by=[sales.c.date.desc(), sales.c.id.asc()])
        grouped: dict[str, list[SaleItem]] = {row["id"]: [] for row in sale_rows}
        for row in self._items.select_rows(order_by=[sale_items.c.id.asc()]):
            if row["sale_id"] in grouped:
                grouped[row["sale_id"]].append(SaleItem.from_row(row))
        return [_to_sale(row, grouped[row["id"]]) for row in sale_rows]

    def delete(self, sale_id: str) -> bool:
        # Lignes d'abord: on ne dépend pas du ON DELETE CASCADE du moteur.
        self._items.delete_rows(sale_items.c.sale_id == sale_id)
        return self._sales.delete_rows(sales.c.id == sale_id) > 0

    def references_product(self, product_id: str) -> bool:
        return bool(self._items.select_rows(sale_items.c.product_id == product_id))


def _to_sale(row: dict, items: list[SaleItem]) -> Sale:
    return Sale(
        id=str(row["id"]),
        date=parse_timestamp(row["date"]),
        total=float(row["total"]),
        items=items,
    )


__all__ = ["SqlSaleRepository"]
