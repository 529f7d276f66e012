"""Activity recorder tests: messages, best-effort semantics, error channel."""

import logging
from datetime import date

import pytest
from httpx import AsyncClient

from bookstock.middleware.exceptions import StoreError
from bookstock.models.activity_log import ActivityType
from bookstock.models.book import Book
from bookstock.models.order import Order
from bookstock.services.store import RecordStore
from bookstock.utils.activity import ActivityRecorder, describe


@pytest.mark.unit
class TestMessages:
    def test_book_messages(self):
        book = Book(name="Dune", category="SciFi", quantity=1, price=1.0, date_added=date(2024, 1, 1))

        assert describe(ActivityType.BOOK_ADDED, book) == 'New book "Dune" added to inventory'
        assert describe(ActivityType.BOOK_UPDATED, book) == 'Book "Dune" updated'
        assert describe(ActivityType.BOOK_DELETED, book) == 'Book "Dune" deleted from inventory'

    def test_order_messages(self):
        order = Order(
            book_name="Emma",
            quantity=1,
            customer_name="Grace",
            category="Classics",
            order_date=date(2024, 1, 1),
            status="pending",
        )

        assert (
            describe(ActivityType.ORDER_RECEIVED, order)
            == "New order received from Grace for Emma (Classics)"
        )
        assert describe(ActivityType.ORDER_UPDATED, order) == "Order from Grace for Emma (Classics) updated"
        assert describe(ActivityType.ORDER_DELETED, order) == "Order from Grace deleted"


@pytest.mark.asyncio
class TestRecorder:
    async def test_record_appends_entry(self, store: RecordStore):
        recorder = ActivityRecorder(store)

        entry = await recorder.record(ActivityType.BOOK_ADDED, "hello")

        assert entry is not None
        assert entry.id is not None
        assert entry.created_at is not None
        assert [a.message for a in await store.list_activities()] == ["hello"]
        assert recorder.failures == 0

    async def test_failure_is_logged_and_counted_not_raised(
        self, store: RecordStore, monkeypatch, caplog
    ):
        async def broken(*args, **kwargs):
            raise StoreError("Failed to record activity", details="disk full")

        monkeypatch.setattr(store, "insert_activity", broken)
        recorder = ActivityRecorder(store)

        with caplog.at_level(logging.WARNING, logger="bookstock.activity"):
            entry = await recorder.record(ActivityType.BOOK_DELETED, "gone")

        assert entry is None
        assert recorder.failures == 1
        assert recorder.last_error == "Failed to record activity"
        assert "book_deleted" in caplog.text


@pytest.mark.api
@pytest.mark.asyncio
class TestPostCommitHook:
    async def test_failed_activity_does_not_fail_the_mutation(
        self, app, client: AsyncClient, store: RecordStore, book_payload, monkeypatch
    ):
        async def broken(*args, **kwargs):
            raise StoreError("Failed to record activity")

        monkeypatch.setattr(store, "insert_activity", broken)

        resp = await client.post("/api/books", json=book_payload)

        assert resp.status_code == 201
        assert len(await store.list_books()) == 1
        assert await store.list_activities() == []
        assert app.state.recorder.failures == 1

        ready = (await client.get("/health/ready")).json()
        assert ready["activity_failures"] == 1

    async def test_failed_mutation_records_nothing(
        self, client: AsyncClient, store: RecordStore, book_payload
    ):
        resp = await client.put("/api/books/77", json=book_payload)

        assert resp.status_code == 404
        assert await store.list_activities() == []
