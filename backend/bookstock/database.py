"""Database engine factory and declarative base.

There is no module-level engine: the application lifespan builds one
from the active settings and hands it to the RecordStore, which owns the
session factory for the lifetime of the process.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from bookstock.config import Settings


class Base(DeclarativeBase):
    """Books, orders and the activity log."""
    pass


def build_engine(app_settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database URL."""
    url = make_url(app_settings.database_url)
    options: dict = {"echo": app_settings.echo_sql}

    # Pool sizing only applies to server databases; SQLite picks its own pool
    if url.get_backend_name() != "sqlite":
        options.update(pool_size=20, max_overflow=10, pool_pre_ping=True)

    return create_async_engine(url, **options)
