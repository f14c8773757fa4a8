"""
Digital twin risk scoring.

A deterministic point counter over recent history. Each rule is independent
and additive; the total is capped, banded into a risk level, and the level
picks a fixed set of nudges. Every rule that moves the score (except the
"no medication plan" bump) leaves a human-readable signal behind so the UI can
explain the number.

`compute_twin` is pure: events and medications are both passed in, so it
never reaches into another store. `TwinStore` owns persistence of the result.
"""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from pydantic import TypeAdapter

from healthtwin.config import ScoringConfig
from healthtwin.domain.models import (
    DigitalTwinState,
    EventType,
    MedicationSchedule,
    RiskLevel,
    TimelineEvent,
)
from healthtwin.services.storage import KeyValueStorage, PersistentStore

SIGNAL_RECENT_EMERGENCY = "Recent emergency event detected"
SIGNAL_INACTIVITY = "No activity logged in 3+ days"
SIGNAL_NO_CHECKUP = "No checkups in last 30 days"
SIGNAL_ADHERENCE_ACTIVE = "Medication adherence active"

NUDGES: dict[RiskLevel, tuple[str, ...]] = {
    RiskLevel.LOW: (
        "Great job maintaining your health logging.",
        "Keep hydrated and active today.",
    ),
    RiskLevel.MODERATE: (
        "Consider booking a checkup soon.",
        "Review your recent activity for irregularities.",
    ),
    RiskLevel.HIGH: (
        "Immediate attention recommended.",
        "Please review your emergency contacts.",
        "Consider sharing your data with a specialist.",
    ),
}

MAX_NUDGES = 3
MAX_SCORE = 100

_CHECKUP_TYPES = frozenset({EventType.APPOINTMENT, EventType.SOAP_NOTE})
_TWIN = TypeAdapter(DigitalTwinState)


def days_between(now: datetime, then: datetime) -> int:
    """Whole days from `then` to `now`, truncated toward zero (negative for future events)."""
    return int((now - then) / timedelta(days=1))


def risk_level_for(score: int, config: ScoringConfig | None = None) -> RiskLevel:
    config = config or ScoringConfig()
    if score > config.high_threshold:
        return RiskLevel.HIGH
    if score > config.moderate_threshold:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def nudges_for(level: RiskLevel, config: ScoringConfig | None = None) -> list[str]:
    config = config or ScoringConfig()
    return list(NUDGES[level][: min(config.max_nudges, MAX_NUDGES)])


def compute_twin(
    events: Sequence[TimelineEvent],
    medications: Sequence[MedicationSchedule],
    *,
    now: datetime | None = None,
    config: ScoringConfig | None = None,
) -> DigitalTwinState:
    """
    Score recent history into a twin state.

    `events` must be newest-insert first (as the timeline store keeps them);
    the inactivity rule looks only at `events[0]`.
    """
    config = config or ScoringConfig()
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    score = 0
    signals: list[str] = []

    if any(
        e.type == EventType.EMERGENCY
        and days_between(now, e.timestamp) <= config.emergency_window_days
        for e in events
    ):
        score += config.emergency_points
        signals.append(SIGNAL_RECENT_EMERGENCY)

    if events and days_between(now, events[0].timestamp) > config.inactivity_days:
        score += config.inactivity_points
        signals.append(SIGNAL_INACTIVITY)

    recent_checkup = any(
        e.type in _CHECKUP_TYPES and days_between(now, e.timestamp) <= config.checkup_window_days
        for e in events
    )
    if events and not recent_checkup:
        score += config.missed_checkup_points
        signals.append(SIGNAL_NO_CHECKUP)

    if not medications:
        # No signal string: too noisy for users who simply track nothing
        score += config.no_medication_points
    elif any(m.active for m in medications):
        score += config.active_adherence_points
        signals.append(SIGNAL_ADHERENCE_ACTIVE)

    score = min(score, MAX_SCORE)
    if config.floor_score_at_zero:
        score = max(score, 0)

    level = risk_level_for(score, config)

    return DigitalTwinState(
        updated_at=now,
        risk_score=score,
        risk_level=level,
        key_signals=signals,
        nudges=nudges_for(level, config),
    )


class TwinStore(PersistentStore):
    """Holds the latest twin state and mirrors it to storage."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = "digital_twin_state",
        config: ScoringConfig | None = None,
    ) -> None:
        super().__init__(storage, key, component="twin_store")
        self.config = config or ScoringConfig()
        self._twin: DigitalTwinState | None = None

    @property
    def twin(self) -> DigitalTwinState | None:
        return self._twin

    async def load_twin(self) -> None:
        """Restore the persisted twin; anything unreadable leaves the current state alone."""
        result = await self._read(_TWIN)
        if result.is_ok() and result.unwrap() is not None:
            self._twin = result.unwrap()
        self.logger.info("twin_loaded", present=self._twin is not None, ok=result.is_ok())

    async def recompute_twin(
        self,
        events: Sequence[TimelineEvent],
        medications: Sequence[MedicationSchedule],
        now: datetime | None = None,
    ) -> DigitalTwinState:
        twin = compute_twin(events, medications, now=now, config=self.config)
        self._twin = twin
        self.logger.info(
            "twin_recomputed",
            risk_score=twin.risk_score,
            risk_level=twin.risk_level.value,
            signals=len(twin.key_signals),
            event_count=len(events),
            medication_count=len(medications),
        )
        await self._write(_TWIN, twin)
        return twin
