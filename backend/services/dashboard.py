"""Dashboard aggregation services."""

from __future__ import annotations

from typing import Any, List

import pandas as pd

from core.data_repository import query_df

from . import sales as sales_service

DEFAULT_LOW_STOCK_THRESHOLD = 10


def fetch_kpis() -> dict[str, float | int]:
    sql = """
        SELECT
            COUNT(id) AS total_products,
            COALESCE(SUM(stock), 0) AS stock_units,
            COALESCE(SUM(stock * purchase_price), 0) AS inventory_purchase_value,
            COALESCE(SUM(stock * sale_price), 0) AS inventory_sale_value
        FROM products
    """
    df = query_df(sql)
    sales_df = sales_service.sales_frame()

    row = df.iloc[0] if not df.empty else {}
    return {
        'total_revenue': round(float(sales_df['total'].sum()) if not sales_df.empty else 0.0, 2),
        'total_sales': int(len(sales_df)),
        'total_products': int(row.get('total_products', 0) or 0),
        'stock_units': int(row.get('stock_units', 0) or 0),
        'inventory_purchase_value': round(float(row.get('inventory_purchase_value', 0) or 0), 2),
        'inventory_sale_value': round(float(row.get('inventory_sale_value', 0) or 0), 2),
    }


def fetch_revenue_by_day() -> List[dict[str, Any]]:
    df = sales_service.sales_frame()
    if df.empty:
        return []
    df['day'] = df['date'].dt.date
    grouped = df.groupby('day', as_index=False)['total'].sum().sort_values('day')
    grouped['total'] = grouped['total'].round(2)
    return grouped.to_dict(orient='records')


def fetch_top_products(*, limit: int = 5) -> List[dict[str, Any]]:
    df = sales_service.sale_items_frame()
    if df.empty:
        return []
    df['revenue'] = df['quantity'] * df['sale_price']
    grouped = (
        df.groupby('product_name', as_index=False)
        .agg(quantity=('quantity', 'sum'), revenue=('revenue', 'sum'))
        .sort_values(['quantity', 'revenue', 'product_name'], ascending=[False, False, True])
        .head(max(1, limit))
    )
    grouped['quantity'] = grouped['quantity'].astype(int)
    grouped['revenue'] = grouped['revenue'].round(2)
    return grouped.to_dict(orient='records')


def fetch_low_stock(*, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> List[dict[str, Any]]:
    sql = """
        SELECT id, name, stock
        FROM products
        WHERE stock <= :threshold
        ORDER BY stock ASC, name ASC
    """
    df = query_df(sql, params={'threshold': int(threshold)})
    if df.empty:
        return []
    df['stock'] = df['stock'].astype(int)
    return df.to_dict(orient='records')


def fetch_dashboard_metrics(*, low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> dict[str, Any]:
    return {
        'kpis': fetch_kpis(),
        'revenue_by_day': fetch_revenue_by_day(),
        'top_products': fetch_top_products(),
        'low_stock': fetch_low_stock(threshold=low_stock_threshold),
    }


__all__ = [
    'fetch_kpis',
    'fetch_revenue_by_day',
    'fetch_top_products',
    'fetch_low_stock',
    'fetch_dashboard_metrics',
]
