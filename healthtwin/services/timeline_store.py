"""
Append-only health timeline.

Events are kept newest-insert first. That is insertion order, not timestamp
order: an event logged late with an old timestamp still lands at the front.
The list is never pruned; `get_recent_events` only limits what is read.
"""

from pydantic import TypeAdapter

from healthtwin.domain.models import TimelineEvent
from healthtwin.services.storage import KeyValueStorage, PersistentStore

_EVENTS = TypeAdapter(list[TimelineEvent])


class TimelineStore(PersistentStore):
    """In-memory timeline mirrored to a single storage key on every mutation."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = "timeline_events",
        default_recent_limit: int = 10,
    ) -> None:
        super().__init__(storage, key, component="timeline_store")
        self.default_recent_limit = default_recent_limit
        self._events: list[TimelineEvent] = []
        self._ids: set[str] = set()

    @property
    def events(self) -> tuple[TimelineEvent, ...]:
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)

    async def add_event(self, event: TimelineEvent) -> None:
        """
        Prepend an event and persist the whole list.

        The event is visible immediately; a failed write is logged and not
        rolled back. An id already on the timeline is logged and skipped.
        """
        if event.id in self._ids:
            self.logger.warning("timeline_duplicate_event_skipped", event_id=event.id)
            return

        self._events = [event, *self._events]
        self._ids.add(event.id)
        self.logger.info("timeline_event_added", event_id=event.id, event_type=event.type.value)

        await self._write(_EVENTS, self._events)

    async def load_events(self) -> None:
        """Replace the in-memory list from storage; empty on missing or unreadable data."""
        result = await self._read(_EVENTS)
        events = result.unwrap_or(None) or []

        self._events = list(events)
        self._ids = {e.id for e in self._events}
        self.logger.info("timeline_loaded", count=len(self._events), ok=result.is_ok())

    def get_recent_events(self, limit: int | None = None) -> list[TimelineEvent]:
        """First `limit` events in insertion order (most recent insert first)."""
        if limit is None:
            limit = self.default_recent_limit
        if limit < 0:
            raise ValueError("limit must be non-negative")
        return self._events[:limit]
