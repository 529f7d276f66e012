"""Async HTTP client for the dashboard views.

Fetches the three dashboard views, polls them on a fixed interval, and
deletes a selection of rows as a batch of independent requests.

Usage:
    async with DashboardClient("http://localhost:8000") as client:
        snapshot = await client.fetch_dashboard()

        stop = asyncio.Event()
        await client.poll(print, interval=60, stop=stop)   # until stop.set()

Any non-2xx response fails the whole fetch cycle with
DashboardFetchError; the poller logs it and tries again on the next
cycle. Nothing is retried within a cycle.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger("bookstock.client")

DELETABLE_KINDS = {"books", "orders"}


class DashboardFetchError(Exception):
    """A dashboard request failed, returned a non-2xx status or a non-JSON body."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


@dataclass
class DashboardSnapshot:
    summary: dict
    chart: dict
    activities: list[dict]


@dataclass
class BatchDeleteResult:
    deleted: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)

    @property
    def partial(self) -> bool:
        return bool(self.deleted) and bool(self.failed)


class DashboardClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Fetching ──────────────────────────────────────────────

    async def _get_json(self, path: str, what: str, params: dict | None = None):
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise DashboardFetchError(f"Failed to fetch {what}: {exc}") from exc
        if not response.is_success:
            raise DashboardFetchError(
                f"Failed to fetch {what}: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise DashboardFetchError(
                f"Failed to fetch {what}: invalid JSON",
                status_code=response.status_code,
            ) from exc

    async def fetch_summary(self, threshold: int | None = None) -> dict:
        params = {"threshold": threshold} if threshold is not None else None
        return await self._get_json("/api/dashboard-summary", "summary", params)

    async def fetch_chart_data(self) -> dict:
        return await self._get_json("/api/chart-data", "chart data")

    async def fetch_activities(self) -> list[dict]:
        return await self._get_json("/api/activities", "activities")

    async def fetch_dashboard(self) -> DashboardSnapshot:
        """Fetch all three views; the first failure aborts the cycle."""
        summary = await self.fetch_summary()
        chart = await self.fetch_chart_data()
        activities = await self.fetch_activities()
        return DashboardSnapshot(summary=summary, chart=chart, activities=activities)

    # ── Polling ───────────────────────────────────────────────

    async def poll(
        self,
        on_snapshot: Callable[[DashboardSnapshot], Awaitable[None] | None],
        interval: float,
        stop: asyncio.Event,
        on_error: Callable[[DashboardFetchError], None] | None = None,
    ) -> int:
        """Fetch the dashboard every `interval` seconds until `stop` is set.

        `stop` is checked between cycles and wakes the sleep immediately;
        cancelling the task running this coroutine also stops it. Returns
        the number of completed cycles.
        """
        cycles = 0
        while not stop.is_set():
            try:
                snapshot = await self.fetch_dashboard()
            except DashboardFetchError as exc:
                logger.warning("Dashboard poll failed: %s", exc)
                if on_error is not None:
                    on_error(exc)
            else:
                result = on_snapshot(snapshot)
                if asyncio.iscoroutine(result):
                    await result
            cycles += 1

            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
        return cycles

    # ── Batch delete ──────────────────────────────────────────

    async def _delete_one(self, kind: str, record_id: int) -> int:
        response = await self._client.delete(f"/api/{kind}/{record_id}")
        return response.status_code

    async def delete_many(self, kind: str, ids: list[int]) -> BatchDeleteResult:
        """Delete each id with its own request, concurrently.

        There is no cross-row atomicity: rows that were deleted stay
        deleted when others fail.
        """
        if kind not in DELETABLE_KINDS:
            raise ValueError(f"Cannot delete {kind!r}; expected one of {sorted(DELETABLE_KINDS)}")

        outcomes = await asyncio.gather(
            *(self._delete_one(kind, record_id) for record_id in ids),
            return_exceptions=True,
        )

        result = BatchDeleteResult()
        for record_id, outcome in zip(ids, outcomes):
            if isinstance(outcome, BaseException):
                result.failed[record_id] = str(outcome) or type(outcome).__name__
            elif outcome == 204:
                result.deleted.append(record_id)
            else:
                result.failed[record_id] = f"HTTP {outcome}"

        if result.failed:
            logger.warning(
                "Deleted %d of %d %s; failed: %s",
                len(result.deleted),
                len(ids),
                kind,
                result.failed,
            )
        return result
