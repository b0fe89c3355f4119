"""Schemas for dashboard metrics."""

from __future__ import annotations

from datetime import date
from typing import List

from pydantic import BaseModel


class DashboardKPIs(BaseModel):
    total_revenue: float
    total_sales: int
    total_products: int
    stock_units: int
    inventory_purchase_value: float
    inventory_sale_value: float


class RevenuePoint(BaseModel):
    day: date
    total: float


class TopProduct(BaseModel):
    product_name: str
    quantity: int
    revenue: float


class LowStockEntry(BaseModel):
    id: str
    name: str
    stock: int


class DashboardResponse(BaseModel):
    kpis: DashboardKPIs
    revenue_by_day: List[RevenuePoint]
    top_products: List[TopProduct]
    low_stock: List[LowStockEntry]


__all__ = ["DashboardResponse", "DashboardKPIs"]
