"""
Domain models for the local health twin.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation and JSON serialization; field aliases keep the
persisted payloads in the camelCase shape the mobile client stores.
"""

import re
from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC so day arithmetic never mixes kinds."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class EventType(str, Enum):
    """Kinds of occurrences recorded on the health timeline."""

    APPOINTMENT = "appointment"
    PLATE_SCAN = "plate_scan"
    SOAP_NOTE = "soap_note"
    EMERGENCY = "emergency"
    CHAT = "chat"


class EventSource(str, Enum):
    """Provenance tag for timeline events."""

    CHAT = "chat"
    VOICE = "voice"
    SYSTEM = "system"
    MANUAL = "manual"


class RiskLevel(str, Enum):
    """Coarse risk bands derived from the twin score."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimelineEvent(_CamelModel):
    """Single logged occurrence; `timestamp` is when it happened, not when it was logged."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    type: EventType
    title: str
    summary: str | None = None
    timestamp: datetime
    source: EventSource

    @field_validator("timestamp")
    @classmethod
    def validate_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class MedicationSchedule(_CamelModel):
    """A medication plan with its daily dose times and today's adherence flag."""

    id: str = Field(min_length=1)
    name: str
    dosage: str
    frequency: str = Field(description='e.g. "Once daily", "Twice daily"')
    times: list[str] = Field(
        default_factory=list, description='Local 24h clock, e.g. ["08:00", "20:00"]'
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    active: bool = True
    taken_today: bool | None = None
    last_taken: datetime | None = None

    @field_validator("times")
    @classmethod
    def validate_times(cls, v: list[str]) -> list[str]:
        for entry in v:
            if not _TIME_OF_DAY.match(entry):
                raise ValueError(f"Invalid time of day {entry!r}, expected HH:MM")
        return v

    @field_validator("created_at", "last_taken")
    @classmethod
    def validate_utc(cls, v: datetime | None) -> datetime | None:
        return None if v is None else _as_utc(v)


class AppointmentEvent(_CamelModel):
    """Locally booked appointment kept in the offline calendar."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    title: str
    specialty: str
    starts_at: datetime = Field(alias="datetime")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source: Literal["chat", "voice", "call"]

    @field_validator("starts_at", "created_at")
    @classmethod
    def validate_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class DigitalTwinState(_CamelModel):
    """Derived risk summary of the user's recent activity."""

    updated_at: datetime
    risk_score: int = Field(le=100)
    risk_level: RiskLevel
    key_signals: list[str] = Field(default_factory=list)
    nudges: list[str] = Field(default_factory=list, max_length=3)

    @field_validator("updated_at")
    @classmethod
    def validate_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class ScheduledReminder(BaseModel):
    """One daily reminder for a single dose time of a medication."""

    model_config = ConfigDict(frozen=True)

    reminder_id: str
    medication_id: str
    time_of_day: str
    title: str
    body: str
    next_fire_at: datetime
