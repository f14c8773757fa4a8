"""
Notification collaborator contract for medication reminders.

The medication store only asks for reminders to be scheduled or cancelled;
delivery (push, local notification, etc.) belongs to the adapter.
"""

from datetime import UTC, datetime, time, timedelta
from typing import Protocol

from healthtwin.domain.models import MedicationSchedule, ScheduledReminder


class ReminderScheduler(Protocol):
    """Schedules one daily reminder per dose time of a medication."""

    async def schedule_medication_reminder(
        self, medication: MedicationSchedule
    ) -> list[ScheduledReminder]: ...

    async def cancel_medication_reminder(self, medication_id: str) -> int: ...


def local_now() -> datetime:
    """Timezone-aware current time on the local wall clock."""
    return datetime.now().astimezone()


def reminder_id_for(medication_id: str, time_of_day: str) -> str:
    return f"{medication_id}:{time_of_day}"


def next_fire_time(time_of_day: str, now: datetime) -> datetime:
    """Next instant at or after `now` whose clock reads `time_of_day` (HH:MM, in now's timezone)."""
    hours, minutes = (int(part) for part in time_of_day.split(":"))
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    candidate = datetime.combine(now.date(), time(hours, minutes), tzinfo=now.tzinfo)
    if candidate < now:
        candidate += timedelta(days=1)
    return candidate


def build_reminders(medication: MedicationSchedule, now: datetime) -> list[ScheduledReminder]:
    return [
        ScheduledReminder(
            reminder_id=reminder_id_for(medication.id, time_of_day),
            medication_id=medication.id,
            time_of_day=time_of_day,
            title="Medication Reminder",
            body=f"Time to take {medication.name} ({medication.dosage})",
            next_fire_at=next_fire_time(time_of_day, now),
        )
        for time_of_day in medication.times
    ]
