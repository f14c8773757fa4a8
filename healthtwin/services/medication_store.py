"""
Medication schedules with a per-medication "taken today" flag.

Adding or removing a medication also asks the reminder collaborator to
schedule or cancel its daily reminders. There is no day-rollover detection:
`reset_daily_adherence` must be called by whoever notices the new day, and
loading from storage keeps whatever `taken_today` values were persisted.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import TypeAdapter

from healthtwin.domain.models import MedicationSchedule
from healthtwin.services.reminders import ReminderScheduler
from healthtwin.services.storage import KeyValueStorage, PersistentStore

_MEDICATIONS = TypeAdapter(list[MedicationSchedule])


class MedicationStore(PersistentStore):
    """In-memory medication list mirrored to a single storage key."""

    def __init__(
        self,
        storage: KeyValueStorage,
        reminders: ReminderScheduler,
        key: str = "medication_schedules",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(storage, key, component="medication_store")
        self.reminders = reminders
        self._clock = clock or (lambda: datetime.now(UTC))
        self._medications: list[MedicationSchedule] = []

    @property
    def medications(self) -> tuple[MedicationSchedule, ...]:
        return tuple(self._medications)

    @property
    def active_medications(self) -> tuple[MedicationSchedule, ...]:
        return tuple(m for m in self._medications if m.active)

    def get(self, medication_id: str) -> MedicationSchedule | None:
        return next((m for m in self._medications if m.id == medication_id), None)

    async def load_medications(self) -> None:
        result = await self._read(_MEDICATIONS)
        self._medications = list(result.unwrap_or(None) or [])
        self.logger.info("medications_loaded", count=len(self._medications), ok=result.is_ok())

    async def add_medication(self, medication: MedicationSchedule) -> None:
        """Append, persist, then schedule one reminder per dose time."""
        self._medications = [*self._medications, medication]
        self.logger.info(
            "medication_added", medication_id=medication.id, times=medication.times
        )
        await self._write(_MEDICATIONS, self._medications)

        try:
            await self.reminders.schedule_medication_reminder(medication)
        except Exception as e:
            self.logger.error(
                "medication_reminder_schedule_failed", medication_id=medication.id, error=str(e)
            )

    async def remove_medication(self, medication_id: str) -> None:
        """Drop the medication, persist, then cancel its reminders."""
        self._medications = [m for m in self._medications if m.id != medication_id]
        self.logger.info("medication_removed", medication_id=medication_id)
        await self._write(_MEDICATIONS, self._medications)

        try:
            await self.reminders.cancel_medication_reminder(medication_id)
        except Exception as e:
            self.logger.error(
                "medication_reminder_cancel_failed", medication_id=medication_id, error=str(e)
            )

    async def toggle_taken(self, medication_id: str) -> None:
        """
        Flip `taken_today`.

        Marking taken stamps `last_taken` with the current time; un-marking
        leaves the previous stamp in place.
        """
        found = False
        updated: list[MedicationSchedule] = []
        for med in self._medications:
            if med.id == medication_id:
                found = True
                taken = not med.taken_today
                changes: dict[str, object] = {"taken_today": taken}
                if taken:
                    changes["last_taken"] = self._clock()
                med = med.model_copy(update=changes)
            updated.append(med)

        if not found:
            self.logger.warning("medication_toggle_unknown_id", medication_id=medication_id)

        self._medications = updated
        await self._write(_MEDICATIONS, self._medications)

    async def reset_daily_adherence(self) -> None:
        self._medications = [m.model_copy(update={"taken_today": False}) for m in self._medications]
        self.logger.info("daily_adherence_reset", count=len(self._medications))
        await self._write(_MEDICATIONS, self._medications)
