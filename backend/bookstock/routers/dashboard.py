"""Dashboard router: aggregated views polled by the dashboard.

Endpoints:
    GET /api/activities                    Latest activity entries, newest first
    GET /api/chart-data                    Books per category, chart.js shape
    GET /api/dashboard-summary             totalBooks / lowStock / totalOrders
    GET /api/dashboard/books-by-category   [{category, amount}]
"""

from fastapi import APIRouter, Depends, Query

from bookstock.config import Settings
from bookstock.deps import get_settings, get_store
from bookstock.schemas.dashboard import (
    ActivityEntry,
    CategoryCount,
    ChartData,
    DashboardSummary,
)
from bookstock.services import dashboard
from bookstock.services.store import RecordStore

router = APIRouter()


@router.get("/activities", response_model=list[ActivityEntry])
async def list_activities(
    store: RecordStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
):
    return await dashboard.load_activity_feed(
        store,
        limit=app_settings.activity_feed_limit,
        offset_hours=app_settings.activity_time_offset_hours,
    )


@router.get("/chart-data", response_model=ChartData)
async def get_chart_data(
    store: RecordStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
):
    return await dashboard.load_chart_data(store, limit=app_settings.chart_category_limit)


@router.get("/dashboard-summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    threshold: int | None = Query(None, ge=0),
    store: RecordStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
):
    """Summary counters. `threshold` overrides the configured low-stock level."""
    if threshold is None:
        threshold = app_settings.low_stock_threshold
    return await dashboard.load_dashboard_summary(store, threshold)


@router.get("/dashboard/books-by-category", response_model=list[CategoryCount])
async def books_by_category(store: RecordStore = Depends(get_store)):
    return await dashboard.load_category_counts(store)
