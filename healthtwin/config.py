"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Scoring weights live here, not scattered through the engine
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()


class StorageConfig(BaseModel):
    """Durable local storage backend and the one key per logical collection."""

    backend: Literal["memory", "file"] = Field(default="file", description="Storage backend")
    data_dir: str = Field(default="./data", description="Directory for the file backend")

    timeline_key: str = Field(default="timeline_events", min_length=1)
    medications_key: str = Field(default="medication_schedules", min_length=1)
    appointments_key: str = Field(default="calendar_appointments", min_length=1)
    twin_key: str = Field(default="digital_twin_state", min_length=1)

    @model_validator(mode="after")
    def keys_are_distinct(self) -> "StorageConfig":
        keys = [self.timeline_key, self.medications_key, self.appointments_key, self.twin_key]
        if len(set(keys)) != len(keys):
            raise ValueError("each store needs its own storage key")
        return self


class ScoringConfig(BaseModel):
    """Point weights, windows and thresholds of the digital twin scorer."""

    emergency_window_days: int = Field(default=7, ge=0)
    emergency_points: int = Field(default=30)

    inactivity_days: int = Field(default=3, ge=0)
    inactivity_points: int = Field(default=5)

    checkup_window_days: int = Field(default=30, ge=0)
    missed_checkup_points: int = Field(default=15)

    no_medication_points: int = Field(default=5)
    active_adherence_points: int = Field(default=-5)

    # Levels: score > high -> High, score > moderate -> Moderate, else Low
    moderate_threshold: int = Field(default=30)
    high_threshold: int = Field(default=70)

    max_nudges: int = Field(default=3, ge=1, le=3)
    floor_score_at_zero: bool = Field(
        default=True, description="Clamp negative scores to 0 in addition to the cap at 100"
    )

    @model_validator(mode="after")
    def thresholds_ordered(self) -> "ScoringConfig":
        if self.moderate_threshold >= self.high_threshold:
            raise ValueError("moderate_threshold must be below high_threshold")
        return self


class TimelineConfig(BaseModel):
    """Timeline read defaults."""

    default_recent_limit: int = Field(default=10, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    storage: StorageConfig = Field(default_factory=StorageConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    timeline: TimelineConfig = Field(default_factory=TimelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _backend_to_literal(val: str) -> Literal["memory", "file"]:
        return "memory" if val.strip().lower() in {"memory", "mem", "inmemory"} else "file"

    def _parse_bool(val: str | None, default: bool) -> bool:
        if val is None:
            return default
        return val.strip().lower() in {"1", "true", "yes", "on"}

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    storage_config = StorageConfig(
        backend=_backend_to_literal(os.getenv("STORAGE_BACKEND", "file")),
        data_dir=os.getenv("DATA_DIR", "./data"),
    )

    scoring_config = ScoringConfig(
        floor_score_at_zero=_parse_bool(os.getenv("TWIN_FLOOR_SCORE_AT_ZERO"), True),
    )

    timeline_config = TimelineConfig(
        default_recent_limit=int(os.getenv("RECENT_EVENTS_LIMIT", "10")),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        storage=storage_config,
        scoring=scoring_config,
        timeline=timeline_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()
