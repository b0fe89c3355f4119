"""Dashboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from backend.schemas.dashboard import DashboardResponse
from backend.services import dashboard as dashboard_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/metrics", response_model=DashboardResponse)
def get_dashboard_metrics(low_stock_threshold: int = Query(10, ge=0, le=10_000)):
    data = dashboard_service.fetch_dashboard_metrics(low_stock_threshold=low_stock_threshold)
    return DashboardResponse(**data)
