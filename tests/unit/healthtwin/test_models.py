"""Test domain model validation."""

from datetime import UTC, datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from healthtwin.domain.models import (
    DigitalTwinState,
    EventSource,
    EventType,
    MedicationSchedule,
    RiskLevel,
    TimelineEvent,
)


class TestTimelineEvent:
    def test_accepts_iso_strings_and_aliases(self) -> None:
        event = TimelineEvent.model_validate(
            {
                "id": "1",
                "type": "soap_note",
                "title": "Consultation",
                "timestamp": "2026-10-18T09:30:00Z",
                "source": "voice",
            }
        )

        assert event.type == EventType.SOAP_NOTE
        assert event.source == EventSource.VOICE
        assert event.summary is None
        assert event.timestamp == datetime(2026, 10, 18, 9, 30, tzinfo=UTC)

    def test_naive_timestamp_is_read_as_utc(self) -> None:
        event = TimelineEvent(
            id="1",
            type=EventType.CHAT,
            title="hi",
            timestamp=datetime(2026, 1, 1, 8, 0),
            source=EventSource.CHAT,
        )
        assert event.timestamp.tzinfo is not None
        assert event.timestamp == datetime(2026, 1, 1, 8, 0, tzinfo=UTC)

    @pytest.mark.parametrize("field,value", [("type", "lab_result"), ("source", "fax")])
    def test_closed_enumerations(self, field: str, value: str) -> None:
        data = {
            "id": "1",
            "type": "chat",
            "title": "x",
            "timestamp": "2026-10-18T09:30:00Z",
            "source": "manual",
            field: value,
        }
        with pytest.raises(ValidationError):
            TimelineEvent.model_validate(data)

    def test_events_are_immutable(self) -> None:
        event = TimelineEvent(
            id="1",
            type=EventType.CHAT,
            title="hi",
            timestamp=datetime(2026, 1, 1, tzinfo=UTC),
            source=EventSource.CHAT,
        )
        with pytest.raises(ValidationError, match="frozen"):
            event.title = "changed"  # type: ignore[misc]


class TestMedicationSchedule:
    @given(
        hour=st.integers(min_value=0, max_value=23),
        minute=st.integers(min_value=0, max_value=59),
    )
    def test_any_valid_clock_time_is_accepted(self, hour: int, minute: int) -> None:
        time_of_day = f"{hour:02d}:{minute:02d}"
        med = MedicationSchedule(
            id="m", name="x", dosage="1", frequency="Daily", times=[time_of_day]
        )
        assert med.times == [time_of_day]

    @pytest.mark.parametrize("bad", ["8:00", "24:00", "12:60", "noon", "08:00:00"])
    def test_invalid_times_rejected(self, bad: str) -> None:
        with pytest.raises(ValidationError, match="HH:MM"):
            MedicationSchedule(id="m", name="x", dosage="1", frequency="Daily", times=[bad])

    def test_defaults(self) -> None:
        med = MedicationSchedule(id="m", name="x", dosage="1", frequency="Daily")

        assert med.active is True
        assert med.taken_today is None
        assert med.last_taken is None
        assert med.created_at.tzinfo == UTC


class TestDigitalTwinState:
    def test_serializes_with_client_field_names(self) -> None:
        twin = DigitalTwinState(
            updated_at=datetime(2026, 10, 19, tzinfo=UTC),
            risk_score=35,
            risk_level=RiskLevel.MODERATE,
            key_signals=["Recent emergency event detected"],
            nudges=["Consider booking a checkup soon."],
        )

        payload = twin.model_dump(by_alias=True, mode="json")

        assert payload["riskScore"] == 35
        assert payload["riskLevel"] == "Moderate"
        assert payload["keySignals"] == ["Recent emergency event detected"]
        assert "updatedAt" in payload

    def test_score_above_cap_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DigitalTwinState(
                updated_at=datetime(2026, 10, 19, tzinfo=UTC),
                risk_score=101,
                risk_level=RiskLevel.HIGH,
            )

    def test_more_than_three_nudges_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DigitalTwinState(
                updated_at=datetime(2026, 10, 19, tzinfo=UTC),
                risk_score=80,
                risk_level=RiskLevel.HIGH,
                nudges=["a", "b", "c", "d"],
            )
