import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookstock.config import Settings, settings
from bookstock.database import build_engine
from bookstock.middleware.exceptions import register_exception_handlers
from bookstock.routers import books, dashboard, health, orders
from bookstock.services.store import RecordStore
from bookstock.utils.activity import ActivityRecorder

logger = logging.getLogger("bookstock")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store on startup, dispose of it on shutdown."""
    app_settings: Settings = app.state.settings
    store = RecordStore(build_engine(app_settings))
    await store.create_tables()

    app.state.store = store
    app.state.recorder = ActivityRecorder(store)
    logger.info("Record store ready (%s)", store.engine.url.render_as_string(hide_password=True))
    try:
        yield
    finally:
        await store.close()
        logger.info("Record store closed")


def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or settings
    logging.basicConfig(
        level=app_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Bookstock",
        description="Book inventory, orders and dashboard API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # ── Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Middleware ───────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ──────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(books.router, prefix="/api/books", tags=["books"])
    app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
    app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])

    return app


app = create_app()
