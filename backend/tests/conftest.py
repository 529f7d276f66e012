"""Pytest configuration and fixtures for Bookstock tests.

Each test gets a fresh app on its own SQLite file with the lifespan
running, so the store and recorder are wired exactly as in production.
"""

from datetime import date
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from bookstock.config import Settings
from bookstock.main import create_app
from bookstock.services.store import RecordStore


# ── App Setup ────────────────────────────────────────────────────

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'bookstock_test.db'}",
        low_stock_threshold=50,
        activity_time_offset_hours=0,
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """App with its lifespan entered (tables created, store attached)."""
    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def store(app) -> RecordStore:
    return app.state.store


# ── Test Data Fixtures ───────────────────────────────────────────

@pytest.fixture
def book_payload() -> dict:
    return {
        "name": "Dune",
        "category": "SciFi",
        "amount": 10,
        "cost": 9.99,
        "date": "2024-01-01",
    }


@pytest.fixture
def order_payload() -> dict:
    return {
        "bookName": "Dune",
        "quantity": 2,
        "customerName": "Ada Lovelace",
        "category": "SciFi",
        "orderDate": "2024-02-01",
        "status": "pending",
    }


@pytest_asyncio.fixture
async def seeded_books(store: RecordStore):
    """A small inventory across three categories."""
    rows = [
        ("Dune", "SciFi", 10),
        ("Neuromancer", "SciFi", 60),
        ("Emma", "Classics", 3),
        ("Cosmos", "Science", 75),
    ]
    return [
        await store.insert_book({
            "name": name,
            "category": category,
            "quantity": quantity,
            "price": 12.5,
            "date_added": date(2024, 1, 1),
        })
        for name, category, quantity in rows
    ]


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: HTTP API tests")
    config.addinivalue_line("markers", "integration: Integration tests")
