"""Best-effort recording of activity log entries.

Usage:
    book = await store.insert_book(fields)
    await recorder.record_for(ActivityType.BOOK_ADDED, book)

The entry is written after the primary mutation has committed, in its
own transaction. A failed write is logged and counted but never raised:
the mutation the caller already committed stands either way.
"""

from __future__ import annotations

import logging

from bookstock.models.activity_log import ActivityLog, ActivityType
from bookstock.services.store import RecordStore

logger = logging.getLogger("bookstock.activity")

MESSAGE_TEMPLATES = {
    ActivityType.BOOK_ADDED: 'New book "{entity.name}" added to inventory',
    ActivityType.BOOK_UPDATED: 'Book "{entity.name}" updated',
    ActivityType.BOOK_DELETED: 'Book "{entity.name}" deleted from inventory',
    ActivityType.ORDER_RECEIVED: (
        "New order received from {entity.customer_name} "
        "for {entity.book_name} ({entity.category})"
    ),
    ActivityType.ORDER_UPDATED: (
        "Order from {entity.customer_name} for {entity.book_name} ({entity.category}) updated"
    ),
    ActivityType.ORDER_DELETED: "Order from {entity.customer_name} deleted",
}


def describe(activity_type: ActivityType, entity) -> str:
    """Render the feed message for a book or order mutation."""
    return MESSAGE_TEMPLATES[activity_type].format(entity=entity)


class ActivityRecorder:
    """Post-commit hook that appends to the activity log.

    `failures` and `last_error` form the recorder's error channel; the
    readiness endpoint reports them.
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self.failures = 0
        self.last_error: str | None = None

    async def record(self, activity_type: ActivityType, message: str) -> ActivityLog | None:
        """Append one entry. Returns None if the write failed."""
        try:
            return await self.store.insert_activity(activity_type, message)
        except Exception as exc:
            self.failures += 1
            self.last_error = str(exc)
            logger.warning(
                "Failed to record %s activity (%s): %s",
                activity_type.value,
                message,
                exc,
            )
            return None

    async def record_for(self, activity_type: ActivityType, entity) -> ActivityLog | None:
        return await self.record(activity_type, describe(activity_type, entity))
