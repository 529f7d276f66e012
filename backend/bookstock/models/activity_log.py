"""ActivityLog: append-only feed of book and order mutations.

Rows are written once by the ActivityRecorder and never updated or
deleted by the application. The dashboard reads the newest entries.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from bookstock.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in `created_at`."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ActivityType(str, enum.Enum):
    BOOK_ADDED = "book_added"
    BOOK_UPDATED = "book_updated"
    BOOK_DELETED = "book_deleted"
    ORDER_RECEIVED = "order_received"
    ORDER_UPDATED = "order_updated"
    ORDER_DELETED = "order_deleted"


class ActivityLog(Base):
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── What ───────────────────────────────────────────────────
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    message: Mapped[str] = mapped_column(String(500), nullable=False)

    # ── Timestamp ──────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, index=True
    )
