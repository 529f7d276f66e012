"""Record store: the only component that talks to the database.

One RecordStore is built per process (see `bookstock.main.lifespan`) and
injected into request handlers. Each call runs in its own session and
commits or rolls back as a unit; SQLAlchemy failures leave the store as
StoreError so handlers never see driver exceptions.

Rows are returned detached (`expire_on_commit=False`), so callers can
read their attributes after the session has closed.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from bookstock.database import Base
from bookstock.middleware.exceptions import ResourceNotFoundError, StoreError
from bookstock.models.activity_log import ActivityLog, ActivityType
from bookstock.models.book import Book
from bookstock.models.order import Order, OrderStatus

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )

    # ── Lifecycle ─────────────────────────────────────────────

    async def create_tables(self) -> None:
        """Create any missing tables. There is no migration tooling."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as exc:
            raise StoreError("Failed to initialise database", details=str(exc)) from exc

    async def ping(self) -> None:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StoreError("Database unreachable", details=str(exc)) from exc

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self, failure_message: str) -> AsyncIterator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error."""
        async with self.session_factory() as db:
            try:
                yield db
                await db.commit()
            # Some drivers raise OverflowError for out-of-range values.
            except (SQLAlchemyError, OverflowError) as exc:
                await db.rollback()
                logger.error("%s: %s", failure_message, exc)
                raise StoreError(failure_message, details=str(exc)) from exc
            except Exception:
                await db.rollback()
                raise

    # ── Books ─────────────────────────────────────────────────

    async def list_books(self, category: str | None = None) -> list[Book]:
        async with self.session("Failed to fetch books") as db:
            query = select(Book)
            if category is not None:
                query = query.where(Book.category == category)
            result = await db.execute(query.order_by(Book.id))
            return list(result.scalars().all())

    async def get_book(self, book_id: int) -> Book:
        async with self.session("Failed to fetch book") as db:
            return await self._get_or_404(db, Book, book_id)

    async def insert_book(self, fields: dict) -> Book:
        async with self.session("Failed to add book") as db:
            book = Book(**fields)
            db.add(book)
            await db.flush()
            return book

    async def update_book(self, book_id: int, fields: dict) -> Book:
        async with self.session("Failed to update book") as db:
            book = await self._get_or_404(db, Book, book_id)
            for key, value in fields.items():
                setattr(book, key, value)
            await db.flush()
            return book

    async def delete_book(self, book_id: int) -> Book:
        """Delete a book and return the removed row."""
        async with self.session("Failed to delete book") as db:
            book = await self._get_or_404(db, Book, book_id)
            await db.delete(book)
            return book

    # ── Orders ────────────────────────────────────────────────

    async def list_orders(self, status: OrderStatus | None = None) -> list[Order]:
        async with self.session("Failed to fetch orders") as db:
            query = select(Order)
            if status is not None:
                query = query.where(Order.status == status.value)
            result = await db.execute(query.order_by(Order.id))
            return list(result.scalars().all())

    async def get_order(self, order_id: int) -> Order:
        async with self.session("Failed to fetch order") as db:
            return await self._get_or_404(db, Order, order_id)

    async def insert_order(self, fields: dict) -> Order:
        async with self.session("Failed to add order") as db:
            order = Order(**_order_columns(fields))
            db.add(order)
            await db.flush()
            return order

    async def update_order(self, order_id: int, fields: dict) -> Order:
        async with self.session("Failed to update order") as db:
            order = await self._get_or_404(db, Order, order_id)
            for key, value in _order_columns(fields).items():
                setattr(order, key, value)
            await db.flush()
            return order

    async def delete_order(self, order_id: int) -> Order:
        """Delete an order and return the removed row."""
        async with self.session("Failed to delete order") as db:
            order = await self._get_or_404(db, Order, order_id)
            await db.delete(order)
            return order

    # ── Activity log ──────────────────────────────────────────

    async def list_activities(self, limit: int = 10) -> list[ActivityLog]:
        """Newest entries first."""
        async with self.session("Failed to fetch activities") as db:
            result = await db.execute(
                select(ActivityLog)
                .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def insert_activity(self, activity_type: ActivityType, message: str) -> ActivityLog:
        async with self.session("Failed to record activity") as db:
            entry = ActivityLog(type=activity_type.value, message=message)
            db.add(entry)
            await db.flush()
            return entry

    # ── Helpers ───────────────────────────────────────────────

    @staticmethod
    async def _get_or_404(db: AsyncSession, model, record_id: int):
        record = await db.get(model, record_id)
        if record is None:
            raise ResourceNotFoundError(model.__name__, record_id)
        return record


def _order_columns(fields: dict) -> dict:
    """Store the enum value, not the enum member."""
    status = fields.get("status")
    if isinstance(status, OrderStatus):
        fields = {**fields, "status": status.value}
    return fields
