"""Dashboard endpoint tests: summary, chart data, activity feed."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import text

from bookstock.middleware.exceptions import StoreError
from bookstock.models.activity_log import ActivityLog, ActivityType, utcnow
from bookstock.services.dashboard import OTHERS
from bookstock.services.store import RecordStore


@pytest.mark.integration
@pytest.mark.asyncio
class TestEndToEnd:
    async def test_new_book_flows_into_every_dashboard_view(self, client: AsyncClient):
        resp = await client.post("/api/books", json={
            "name": "Dune",
            "category": "SciFi",
            "amount": 10,
            "cost": 9.99,
            "date": "2024-01-01",
        })
        assert resp.status_code == 201
        book_id = resp.json()["id"]

        books = (await client.get("/api/books")).json()
        assert [b["id"] for b in books] == [book_id]

        chart = (await client.get("/api/chart-data")).json()
        assert dict(zip(chart["labels"], chart["datasets"][0]["data"])) == {"SciFi": 10}

        activities = (await client.get("/api/activities")).json()
        assert activities[0]["type"] == "book_added"
        assert activities[0]["message"] == 'New book "Dune" added to inventory'
        assert activities[0]["timeAgo"] == "Just now"


@pytest.mark.api
@pytest.mark.asyncio
class TestDashboardSummary:
    async def test_empty_store(self, client: AsyncClient):
        resp = await client.get("/api/dashboard-summary")

        assert resp.status_code == 200
        assert resp.json() == {"totalBooks": 0, "lowStock": 0, "totalOrders": 0}

    async def test_summary_over_seeded_books(self, client: AsyncClient, seeded_books, order_payload):
        await client.post("/api/orders", json=order_payload)

        body = (await client.get("/api/dashboard-summary")).json()

        assert body["totalBooks"] == 10 + 60 + 3 + 75
        assert body["lowStock"] == 2  # Dune (10), Emma (3) under 50
        assert body["totalOrders"] == 1

    async def test_threshold_override(self, client: AsyncClient, seeded_books):
        low = (await client.get("/api/dashboard-summary", params={"threshold": 5})).json()
        high = (await client.get("/api/dashboard-summary", params={"threshold": 100})).json()

        assert low["lowStock"] == 1
        assert high["lowStock"] == 4

    async def test_negative_threshold_is_400(self, client: AsyncClient):
        resp = await client.get("/api/dashboard-summary", params={"threshold": -1})

        assert resp.status_code == 400


@pytest.mark.api
@pytest.mark.asyncio
class TestChartData:
    async def test_chart_is_ranked(self, client: AsyncClient, seeded_books):
        chart = (await client.get("/api/chart-data")).json()

        assert chart["labels"] == ["Science", "SciFi", "Classics"]
        assert chart["datasets"][0]["data"] == [75, 70, 3]
        assert chart["datasets"][0]["label"] == "Number of Books per Category"
        assert len(chart["datasets"][0]["backgroundColor"]) == 3

    async def test_chart_is_bounded_to_ten_labels(self, client: AsyncClient, book_payload):
        for i in range(12):
            await client.post(
                "/api/books", json={**book_payload, "category": f"Genre {i}", "amount": 100 - i}
            )

        chart = (await client.get("/api/chart-data")).json()

        assert len(chart["labels"]) == 11
        assert chart["labels"][-1] == OTHERS
        assert chart["datasets"][0]["data"][-1] == (100 - 10) + (100 - 11)

    async def test_books_by_category(self, client: AsyncClient, seeded_books):
        rows = (await client.get("/api/dashboard/books-by-category")).json()

        assert rows == [
            {"category": "SciFi", "amount": 70},
            {"category": "Classics", "amount": 3},
            {"category": "Science", "amount": 75},
        ]


@pytest.mark.api
@pytest.mark.asyncio
class TestActivityFeed:
    async def test_newest_first_and_limited_to_ten(self, client: AsyncClient, book_payload):
        for i in range(12):
            await client.post("/api/books", json={**book_payload, "name": f"Book {i}"})

        feed = (await client.get("/api/activities")).json()

        assert len(feed) == 10
        assert feed[0]["message"] == 'New book "Book 11" added to inventory'
        assert feed[-1]["message"] == 'New book "Book 2" added to inventory'

    async def test_time_ago_uses_stored_timestamp(self, client: AsyncClient, store: RecordStore):
        async with store.session("seed") as db:
            db.add(ActivityLog(
                type=ActivityType.BOOK_ADDED.value,
                message="old entry",
                created_at=utcnow() - timedelta(hours=3, minutes=5),
            ))

        feed = (await client.get("/api/activities")).json()

        assert feed[0]["timeAgo"] == "3 hours ago"
        assert "createdAt" in feed[0]

    async def test_every_mutation_type_is_logged(self, client: AsyncClient, book_payload, order_payload):
        book = (await client.post("/api/books", json=book_payload)).json()
        await client.put(f"/api/books/{book['id']}", json=book_payload)
        await client.delete(f"/api/books/{book['id']}")
        order = (await client.post("/api/orders", json=order_payload)).json()
        await client.put(f"/api/orders/{order['id']}", json=order_payload)
        await client.delete(f"/api/orders/{order['id']}")

        feed = (await client.get("/api/activities")).json()

        assert [a["type"] for a in feed] == [
            "order_deleted",
            "order_updated",
            "order_received",
            "book_deleted",
            "book_updated",
            "book_added",
        ]
        assert feed[0]["message"] == "Order from Ada Lovelace deleted"
        assert feed[2]["message"] == "New order received from Ada Lovelace for Dune (SciFi)"
        assert feed[3]["message"] == 'Book "Dune" deleted from inventory'

    async def test_deleting_missing_book_logs_nothing(self, client: AsyncClient):
        resp = await client.delete("/api/books/999")

        assert resp.status_code == 404
        assert (await client.get("/api/activities")).json() == []


@pytest.mark.integration
@pytest.mark.asyncio
class TestStoreFailures:
    async def test_chart_fails_whole_request_when_store_errors(
        self, client: AsyncClient, store: RecordStore, monkeypatch
    ):
        async def unreachable(*args, **kwargs):
            raise StoreError("Failed to fetch books", details="connection refused")

        monkeypatch.setattr(store, "list_books", unreachable)

        resp = await client.get("/api/chart-data")

        assert resp.status_code == 500
        assert resp.json() == {
            "error": {
                "code": "STORE_ERROR",
                "message": "Failed to fetch books",
                "details": "connection refused",
            }
        }

    async def test_summary_fails_when_orders_table_is_gone(
        self, client: AsyncClient, store: RecordStore, seeded_books
    ):
        async with store.engine.begin() as conn:
            await conn.execute(text("DROP TABLE orders"))

        resp = await client.get("/api/dashboard-summary")

        assert resp.status_code == 500
        error = resp.json()["error"]
        assert error["code"] == "STORE_ERROR"
        assert error["message"] == "Failed to fetch orders"
        assert "orders" in error["details"]

    async def test_malformed_rows_fail_the_aggregation(
        self, client: AsyncClient, store: RecordStore, monkeypatch
    ):
        class Broken:
            category = "SciFi"
            quantity = "ten"

        async def malformed(*args, **kwargs):
            return [Broken()]

        monkeypatch.setattr(store, "list_books", malformed)

        resp = await client.get("/api/chart-data")

        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "STORE_ERROR"

    async def test_readiness_reports_database(self, client: AsyncClient):
        resp = await client.get("/health/ready")

        assert resp.status_code == 200
        assert resp.json()["checks"]["database"] == "ok"
