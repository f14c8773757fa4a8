"""
Core services for the health twin.

This package contains the store implementations and the twin scoring engine.
The composed HealthTwinService lives in `healthtwin.services.health_twin`.
"""

from .calendar_store import CalendarStore
from .medication_store import MedicationStore
from .storage import KeyValueStorage, PersistentStore, Result, StorageError
from .timeline_store import TimelineStore
from .twin_engine import TwinStore, compute_twin

__all__ = [
    "CalendarStore",
    "KeyValueStorage",
    "MedicationStore",
    "PersistentStore",
    "Result",
    "StorageError",
    "TimelineStore",
    "TwinStore",
    "compute_twin",
]
