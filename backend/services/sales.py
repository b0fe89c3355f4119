"""Sale queries (sales joined with their items)."""

from __future__ import annotations

import pandas as pd

from core.data_repository import query_df
from core.inventory_ledger import SaleNotFoundError
from core.models import Sale
from core.repositories import SqlUnitOfWork


def get_sales() -> list[Sale]:
    """Return every sale, most recent first, each with its items in entry order."""
    with SqlUnitOfWork() as uow:
        return list(uow.sales.list_all())


def get_sale(sale_id: str) -> Sale:
    with SqlUnitOfWork() as uow:
        sale = uow.sales.get(sale_id)
    if sale is None:
        raise SaleNotFoundError(sale_id)
    return sale


def sales_frame() -> pd.DataFrame:
    sql = """
        SELECT s.id, s.date, s.total, COUNT(si.id) AS item_count
        FROM sales s
        LEFT JOIN sale_items si ON si.sale_id = s.id
        GROUP BY s.id, s.date, s.total
        ORDER BY s.date DESC
    """
    df = query_df(sql)
    if not df.empty:
        df["date"] = pd.to_datetime(df["date"], utc=True, format="ISO8601")
        df["total"] = df["total"].astype(float)
        df["item_count"] = df["item_count"].astype(int)
    return df


def sale_items_frame() -> pd.DataFrame:
    sql = """
        SELECT si.sale_id, si.product_id, si.product_name, si.quantity, si.sale_price
        FROM sale_items si
        ORDER BY si.id ASC
    """
    df = query_df(sql)
    if not df.empty:
        df["quantity"] = df["quantity"].astype(int)
        df["sale_price"] = df["sale_price"].astype(float)
    return df


__all__ = ["get_sales", "get_sale", "sales_frame", "sale_items_frame"]
