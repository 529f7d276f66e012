"""Management CLI.

Usage:
    python -m bookstock.cli init-db      # Create missing tables
    python -m bookstock.cli summary      # Print dashboard summary from the database
    python -m bookstock.cli watch        # Poll the running API and print each snapshot
    python -m bookstock.cli serve        # Run the API with uvicorn
"""

import asyncio
import sys

from bookstock.client import DashboardClient, DashboardSnapshot
from bookstock.config import Settings, settings
from bookstock.database import build_engine
from bookstock.services import dashboard
from bookstock.services.store import RecordStore


def init_db(app_settings: Settings = settings):
    async def _run():
        store = RecordStore(build_engine(app_settings))
        try:
            await store.create_tables()
        finally:
            await store.close()

    asyncio.run(_run())
    print("Tables ready.")


def show_summary(app_settings: Settings = settings):
    async def _run():
        store = RecordStore(build_engine(app_settings))
        try:
            await store.create_tables()
            summary = await dashboard.load_dashboard_summary(
                store, app_settings.low_stock_threshold
            )
            counts = await dashboard.load_category_counts(store)
        finally:
            await store.close()
        return summary, counts

    summary, counts = asyncio.run(_run())
    print(f"  Total books:  {summary.total_books}")
    print(f"  Low stock:    {summary.low_stock} (< {app_settings.low_stock_threshold})")
    print(f"  Total orders: {summary.total_orders}")
    for row in counts:
        print(f"    {row.category}: {row.amount}")


def _print_snapshot(snapshot: DashboardSnapshot):
    s = snapshot.summary
    print(
        f"books={s['totalBooks']} low_stock={s['lowStock']} orders={s['totalOrders']}"
        f" categories={len(snapshot.chart['labels'])}"
    )
    for activity in snapshot.activities[:3]:
        print(f"  {activity['timeAgo']}: {activity['message']}")


def watch(app_settings: Settings = settings):
    async def _run():
        stop = asyncio.Event()
        async with DashboardClient(
            app_settings.api_base_url, timeout=app_settings.request_timeout_seconds
        ) as client:
            await client.poll(
                _print_snapshot,
                interval=app_settings.poll_interval_seconds,
                stop=stop,
                on_error=lambda exc: print(f"  FAILED: {exc}"),
            )

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        print("Stopped.")


def serve():
    import uvicorn

    uvicorn.run("bookstock.main:app", host="0.0.0.0", port=8000)


COMMANDS = {
    "init-db": init_db,
    "summary": show_summary,
    "watch": watch,
    "serve": serve,
}


def main():
    cmd = sys.argv[1] if len(sys.argv) > 1 else ""
    if cmd in COMMANDS:
        COMMANDS[cmd]()
    else:
        print(f"Usage: python -m bookstock.cli [{'|'.join(COMMANDS)}]")
        sys.exit(2)


if __name__ == "__main__":
    main()
