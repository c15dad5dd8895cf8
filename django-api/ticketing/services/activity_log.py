"""Append-only log of order, check-in and refund activity."""

from collections.abc import Callable
from datetime import datetime

import structlog
from django.utils import timezone

from ticketing.domain import ActivityEntry, ActivityId, ActivityType
from ticketing.stores.interfaces import TicketingStore

logger = structlog.get_logger(__name__)


class ActivityLog:
    """Records what happened. Entries are never changed or removed."""

    def __init__(
        self,
        store: TicketingStore,
        clock: Callable[[], datetime] = timezone.now,
        default_limit: int = 10,
    ) -> None:
        self._store = store
        self._clock = clock
        self._default_limit = default_limit

    def record(self, activity_type: ActivityType, description: str, actor: str) -> ActivityEntry:
        entry = ActivityEntry(
            id=ActivityId.generate(),
            type=activity_type,
            description=description,
            timestamp=self._clock(),
            actor=actor,
        )
        self._store.append_activity(entry)
        logger.info("activity_recorded", activity_type=activity_type.value, actor=actor, description=description)
        return entry

    def entries(self) -> list[ActivityEntry]:
        return self._store.list_activity()

    def recent(self, limit: int | None = None) -> list[ActivityEntry]:
        """Return the newest entries first."""
        limit = self._default_limit if limit is None else limit
        if limit <= 0:
            return []
        entries = self._store.list_activity()
        # Stable sort keeps later inserts first among equal timestamps.
        newest_first = sorted(reversed(entries), key=lambda e: e.timestamp, reverse=True)
        return newest_first[:limit]
