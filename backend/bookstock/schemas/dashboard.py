"""Pydantic schemas for the dashboard: summary, chart data, activity feed.

Fields are camelCase on the wire and accept either spelling on input.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


def _camel(name: str, wire: str):
    return Field(validation_alias=AliasChoices(name, wire), serialization_alias=wire)


# ── Summary ───────────────────────────────────────────────────

class DashboardSummary(BaseModel):
    total_books: int = _camel("total_books", "totalBooks")
    low_stock: int = _camel("low_stock", "lowStock")
    total_orders: int = _camel("total_orders", "totalOrders")


# ── Chart ─────────────────────────────────────────────────────

class ChartDataset(BaseModel):
    label: str
    data: list[int]
    background_color: list[str] = _camel("background_color", "backgroundColor")


class ChartData(BaseModel):
    labels: list[str]
    datasets: list[ChartDataset]


class CategoryCount(BaseModel):
    category: str
    amount: int


# ── Activity feed ─────────────────────────────────────────────

class ActivityEntry(BaseModel):
    id: int
    type: str
    message: str
    created_at: datetime = _camel("created_at", "createdAt")
    time_ago: str = _camel("time_ago", "timeAgo")
