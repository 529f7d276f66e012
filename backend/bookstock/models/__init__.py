"""Aggregate model imports so `Base.metadata` sees every table."""

from bookstock.models.activity_log import ActivityLog, ActivityType  # noqa: F401
from bookstock.models.book import Book  # noqa: F401
from bookstock.models.order import Order, OrderStatus  # noqa: F401
