"""
Composed application state for the health twin.

One HealthTwinService is built at start-up and handed to whatever needs it.
It owns one instance of every store, wired to a shared storage backend and
reminder scheduler. Nothing here recomputes the twin behind the caller's
back: store mutations never trigger `refresh_twin`.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from uuid import uuid4

from adapters.notifications import LocalReminderScheduler
from adapters.storage import InMemoryStorage, JsonFileStorage
from healthtwin.config import AppConfig, StorageConfig, get_config
from healthtwin.domain.models import (
    DigitalTwinState,
    EventSource,
    EventType,
    MedicationSchedule,
    TimelineEvent,
)
from healthtwin.log import logger
from healthtwin.services.calendar_store import CalendarStore
from healthtwin.services.medication_store import MedicationStore
from healthtwin.services.reminders import ReminderScheduler, local_now
from healthtwin.services.storage import KeyValueStorage
from healthtwin.services.timeline_store import TimelineStore
from healthtwin.services.twin_engine import TwinStore


def build_storage(config: StorageConfig) -> KeyValueStorage:
    """Instantiate the configured storage backend."""
    if config.backend == "memory":
        return InMemoryStorage()
    return JsonFileStorage(Path(config.data_dir))


class HealthTwinService:
    """
    Entry point that wires the timeline, medication, calendar and twin stores.

    Design principles:
    - Dependency injection: storage and reminders are passed in, never global
    - Explicit refresh: the caller decides when the twin is recomputed
    - Failure isolation: one store failing to load never blocks the others
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        reminders: ReminderScheduler | None = None,
        config: AppConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or get_config()
        self.clock = clock or local_now
        self.storage = storage if storage is not None else build_storage(self.config.storage)
        self.reminders = reminders if reminders is not None else LocalReminderScheduler(self.clock)
        self.logger = logger.bind(component="health_twin_service")

        keys = self.config.storage
        self.timeline = TimelineStore(
            self.storage,
            key=keys.timeline_key,
            default_recent_limit=self.config.timeline.default_recent_limit,
        )
        self.medications = MedicationStore(
            self.storage, self.reminders, key=keys.medications_key, clock=self.clock
        )
        self.calendar = CalendarStore(self.storage, key=keys.appointments_key)
        self.twin = TwinStore(self.storage, key=keys.twin_key, config=self.config.scoring)

    async def startup(self) -> None:
        """Load every store from storage."""
        await asyncio.gather(
            self.timeline.load_events(),
            self.medications.load_medications(),
            self.calendar.load_appointments(),
            self.twin.load_twin(),
        )
        self.logger.info(
            "health_twin_started",
            events=len(self.timeline),
            medications=len(self.medications.medications),
            appointments=len(self.calendar.appointments),
            has_twin=self.twin.twin is not None,
        )

    async def refresh_twin(self, now: datetime | None = None) -> DigitalTwinState:
        """Recompute the twin from the current timeline and medication list."""
        return await self.twin.recompute_twin(
            self.timeline.events,
            self.medications.medications,
            now=now or self.clock(),
        )

    async def log_medication(self, medication: MedicationSchedule) -> None:
        """Add a medication and record it on the timeline."""
        await self.medications.add_medication(medication)
        await self.timeline.add_event(
            TimelineEvent(
                id=f"med-log-{medication.id}-{uuid4().hex[:12]}",
                type=EventType.CHAT,
                title=f"Medication Added: {medication.name}",
                summary=f"Reminder set for {', '.join(medication.times)}",
                timestamp=self.clock(),
                source=EventSource.SYSTEM,
            )
        )

    async def seed_demo_data(self, now: datetime | None = None) -> None:
        """Populate a believable week of history for demos."""
        now = now or self.clock()

        history = [
            TimelineEvent(
                id="demo-apt-1",
                type=EventType.APPOINTMENT,
                title="Cardiology Checkup",
                summary="Scheduled with Dr. Smith for next Tuesday.",
                timestamp=now - timedelta(days=3),
                source=EventSource.SYSTEM,
            ),
            TimelineEvent(
                id="demo-plate-1",
                type=EventType.PLATE_SCAN,
                title="Lunch: Grilled Chicken Salad",
                summary="520 kcal, 38g protein, balanced meal.",
                timestamp=now - timedelta(days=2),
                source=EventSource.SYSTEM,
            ),
            TimelineEvent(
                id="demo-soap-1",
                type=EventType.SOAP_NOTE,
                title="Consultation Note: Migraine",
                summary="Likely tension headache. Plan: rest and fluids.",
                timestamp=now - timedelta(days=1),
                source=EventSource.VOICE,
            ),
            TimelineEvent(
                id="demo-emg-1",
                type=EventType.EMERGENCY,
                title="Emergency: Chest Pain",
                summary="User activated Heart Attack protocol.",
                timestamp=now - timedelta(days=5),
                source=EventSource.SYSTEM,
            ),
        ]
        for event in history:
            await self.timeline.add_event(event)

        await self.medications.add_medication(
            MedicationSchedule(
                id="demo-med-1",
                name="Amoxicillin",
                dosage="500mg",
                frequency="Twice daily",
                times=["08:00", "20:00"],
                created_at=now,
                active=True,
                taken_today=False,
            )
        )
        await self.timeline.add_event(
            TimelineEvent(
                id="demo-med-log-1",
                type=EventType.CHAT,
                title="Medication Added: Amoxicillin",
                summary="Reminder set for 08:00, 20:00",
                timestamp=now,
                source=EventSource.SYSTEM,
            )
        )
        self.logger.info("demo_data_seeded", events=len(self.timeline))
