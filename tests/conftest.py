"""Shared fixtures for the health twin test suite."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from adapters.notifications import LocalReminderScheduler
from adapters.storage import InMemoryStorage
from healthtwin.domain.models import EventSource, EventType, MedicationSchedule, TimelineEvent

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock(now: datetime) -> Callable[[], datetime]:
    return lambda: now


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def scheduler(clock: Callable[[], datetime]) -> LocalReminderScheduler:
    return LocalReminderScheduler(clock=clock)


@pytest.fixture
def make_event(now: datetime) -> Callable[..., TimelineEvent]:
    """Factory for timeline events placed `days_ago` before the fixed clock."""
    counter = iter(range(1, 10_000))

    def _make(
        event_type: EventType = EventType.CHAT,
        days_ago: float = 0,
        event_id: str | None = None,
        source: EventSource = EventSource.MANUAL,
    ) -> TimelineEvent:
        return TimelineEvent(
            id=event_id or f"evt-{next(counter)}",
            type=event_type,
            title=f"{event_type.value} event",
            timestamp=now - timedelta(days=days_ago),
            source=source,
        )

    return _make


@pytest.fixture
def make_medication(now: datetime) -> Callable[..., MedicationSchedule]:
    def _make(
        med_id: str = "med-1",
        active: bool = True,
        times: list[str] | None = None,
    ) -> MedicationSchedule:
        return MedicationSchedule(
            id=med_id,
            name="Metformin",
            dosage="500mg",
            frequency="Twice daily",
            times=times if times is not None else ["08:00", "20:00"],
            created_at=now,
            active=active,
            taken_today=False,
        )

    return _make
