"""
In-process reminder scheduler.

Keeps scheduled reminders in memory, keyed by reminder id, and reports which
ones are due. A device integration would hand the same ScheduledReminder
objects to the platform's notification API instead.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from healthtwin.domain.models import MedicationSchedule, ScheduledReminder
from healthtwin.log import logger
from healthtwin.services.reminders import build_reminders, local_now, next_fire_time


class LocalReminderScheduler:
    """Implementation of the ReminderScheduler protocol backed by a dict."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or local_now
        self._reminders: dict[str, ScheduledReminder] = {}
        self.logger = logger.bind(component="local_reminder_scheduler")

    async def schedule_medication_reminder(
        self, medication: MedicationSchedule
    ) -> list[ScheduledReminder]:
        if not medication.active:
            self.logger.info("reminder_skipped_inactive", medication_id=medication.id)
            return []

        reminders = build_reminders(medication, self._clock())
        for reminder in reminders:
            self._reminders[reminder.reminder_id] = reminder

        self.logger.info(
            "medication_reminders_scheduled",
            medication_id=medication.id,
            count=len(reminders),
            times=medication.times,
        )
        return reminders

    async def cancel_medication_reminder(self, medication_id: str) -> int:
        doomed = [rid for rid, r in self._reminders.items() if r.medication_id == medication_id]
        for rid in doomed:
            del self._reminders[rid]

        self.logger.info(
            "medication_reminders_cancelled", medication_id=medication_id, count=len(doomed)
        )
        return len(doomed)

    def pending(self) -> list[ScheduledReminder]:
        """All scheduled reminders, soonest first."""
        return sorted(self._reminders.values(), key=lambda r: r.next_fire_at)

    def pop_due(self, now: datetime | None = None) -> list[ScheduledReminder]:
        """
        Return reminders whose fire time has passed and re-arm them for the next day.

        Daily reminders never expire; firing only advances `next_fire_at`.
        """
        now = now or self._clock()
        due = [r for r in self.pending() if r.next_fire_at <= now]
        for reminder in due:
            # Strictly after now, so a reminder fires at most once per day
            rearmed = next_fire_time(reminder.time_of_day, now + timedelta(seconds=1))
            self._reminders[reminder.reminder_id] = reminder.model_copy(
                update={"next_fire_at": rearmed}
            )
        return due
