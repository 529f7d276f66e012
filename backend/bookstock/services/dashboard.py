"""Dashboard aggregation: category distribution, summary counters, time-ago labels.

Everything here works on already-fetched rows (or any objects with the
same attributes); nothing is materialised in the database. The `load_*`
coroutines fetch what they need from the RecordStore first and only then
aggregate, so a store failure fails the whole view.

Policies:
    - Books with a missing or blank category count as UNCATEGORIZED.
    - Chart consumers get at most `limit` labels; the rest fold into OTHERS.
    - totalBooks is the summed quantity, not the row count.
    - lowStock counts books strictly below the threshold.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from itertools import cycle, islice

from bookstock.middleware.exceptions import StoreError
from bookstock.schemas.dashboard import (
    ActivityEntry,
    CategoryCount,
    ChartData,
    ChartDataset,
    DashboardSummary,
)
from bookstock.services.store import RecordStore

UNCATEGORIZED = "Uncategorized"
OTHERS = "Others"
CHART_LABEL = "Number of Books per Category"
CHART_COLORS = ["#FF6384", "#36A2EB", "#FFCE56", "#4BC0C0", "#9966FF", "#FF9F40"]


# ── Category distribution ─────────────────────────────────────

def category_distribution(books: Iterable) -> dict[str, int]:
    """Sum quantities per category, in order of first occurrence."""
    totals: dict[str, int] = {}
    for book in books:
        category = (book.category or "").strip() or UNCATEGORIZED
        totals[category] = totals.get(category, 0) + (book.quantity or 0)
    return totals


def bounded_distribution(distribution: dict[str, int], limit: int = 10) -> dict[str, int]:
    """Rank by descending quantity and fold everything past `limit` into OTHERS.

    Ties keep their first-occurrence order. The total is preserved.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    ranked = sorted(distribution.items(), key=lambda item: item[1], reverse=True)
    kept = dict(ranked[:limit])
    overflow = ranked[limit:]
    if overflow:
        kept[OTHERS] = kept.get(OTHERS, 0) + sum(quantity for _, quantity in overflow)
    return kept


def chart_data(books: Iterable, limit: int = 10) -> ChartData:
    distribution = bounded_distribution(category_distribution(books), limit)
    labels = list(distribution)
    return ChartData(
        labels=labels,
        datasets=[
            ChartDataset(
                label=CHART_LABEL,
                data=list(distribution.values()),
                background_color=list(islice(cycle(CHART_COLORS), len(labels))),
            )
        ],
    )


def category_counts(books: Iterable) -> list[CategoryCount]:
    return [
        CategoryCount(category=category, amount=amount)
        for category, amount in category_distribution(books).items()
    ]


# ── Summary ───────────────────────────────────────────────────

def count_low_stock(books: Iterable, threshold: int) -> int:
    return sum(1 for book in books if (book.quantity or 0) < threshold)


def dashboard_summary(books: list, orders: list, low_stock_threshold: int) -> DashboardSummary:
    return DashboardSummary(
        total_books=sum(book.quantity or 0 for book in books),
        low_stock=count_low_stock(books, low_stock_threshold),
        total_orders=len(orders),
    )


# ── Time ago ──────────────────────────────────────────────────

def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''} ago"


def time_ago(
    timestamp: datetime,
    now: datetime | None = None,
    offset_hours: float = 0.0,
) -> str:
    """Human-readable age of `timestamp`.

    Naive datetimes are taken as UTC. `offset_hours` shifts the stored
    timestamp before comparing, for stores that write local time.
    """
    now = _naive_utc(now) if now else datetime.now(timezone.utc).replace(tzinfo=None)
    shifted = _naive_utc(timestamp) + timedelta(hours=offset_hours)

    elapsed_ms = (now - shifted) // timedelta(milliseconds=1)
    minutes = elapsed_ms // 1000 // 60
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")
    return _plural(hours // 24, "day")


# ── Loaders ───────────────────────────────────────────────────

def _aggregate(failure_message: str, func, *args):
    """Run an aggregation, turning malformed rows into a StoreError."""
    try:
        return func(*args)
    except (TypeError, ValueError, AttributeError) as exc:
        raise StoreError(failure_message, details=str(exc)) from exc


async def load_chart_data(store: RecordStore, limit: int = 10) -> ChartData:
    books = await store.list_books()
    return _aggregate("Failed to fetch chart data", chart_data, books, limit)


async def load_category_counts(store: RecordStore) -> list[CategoryCount]:
    books = await store.list_books()
    return _aggregate("Failed to fetch dashboard data", category_counts, books)


async def load_dashboard_summary(store: RecordStore, low_stock_threshold: int) -> DashboardSummary:
    books = await store.list_books()
    orders = await store.list_orders()
    return _aggregate(
        "Failed to fetch dashboard summary",
        dashboard_summary,
        books,
        orders,
        low_stock_threshold,
    )


async def load_activity_feed(
    store: RecordStore,
    limit: int = 10,
    offset_hours: float = 0.0,
    now: datetime | None = None,
) -> list[ActivityEntry]:
    activities = await store.list_activities(limit)
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)

    def build():
        return [
            ActivityEntry(
                id=a.id,
                type=a.type,
                message=a.message,
                created_at=a.created_at,
                time_ago=time_ago(a.created_at, now, offset_hours),
            )
            for a in activities
        ]

    return _aggregate("Failed to fetch activities", build)
