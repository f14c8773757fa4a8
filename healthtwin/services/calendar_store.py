"""Offline calendar of locally booked appointments."""

from datetime import UTC, datetime

from pydantic import TypeAdapter

from healthtwin.domain.models import AppointmentEvent
from healthtwin.services.storage import KeyValueStorage, PersistentStore

_APPOINTMENTS = TypeAdapter(list[AppointmentEvent])


class CalendarStore(PersistentStore):
    """Appointment list mirrored to a single storage key."""

    def __init__(self, storage: KeyValueStorage, key: str = "calendar_appointments") -> None:
        super().__init__(storage, key, component="calendar_store")
        self._appointments: list[AppointmentEvent] = []

    @property
    def appointments(self) -> tuple[AppointmentEvent, ...]:
        return tuple(self._appointments)

    async def load_appointments(self) -> None:
        result = await self._read(_APPOINTMENTS)
        self._appointments = list(result.unwrap_or(None) or [])
        self.logger.info("appointments_loaded", count=len(self._appointments), ok=result.is_ok())

    async def add_appointment(self, appointment: AppointmentEvent) -> None:
        self._appointments = [*self._appointments, appointment]
        self.logger.info(
            "appointment_added", appointment_id=appointment.id, specialty=appointment.specialty
        )
        await self._write(_APPOINTMENTS, self._appointments)

    async def remove_appointment(self, appointment_id: str) -> None:
        self._appointments = [a for a in self._appointments if a.id != appointment_id]
        self.logger.info("appointment_removed", appointment_id=appointment_id)
        await self._write(_APPOINTMENTS, self._appointments)

    def upcoming(self, now: datetime | None = None) -> list[AppointmentEvent]:
        """Appointments starting at or after `now`, soonest first."""
        now = now or datetime.now(UTC)
        upcoming = [a for a in self._appointments if a.starts_at >= now]
        return sorted(upcoming, key=lambda a: a.starts_at)
