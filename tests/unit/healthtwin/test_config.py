"""
Tests for configuration management in `healthtwin/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Storage backend and scoring overrides
- get_config cache behavior
- Cross-field validation (debug only in development, ordered thresholds, distinct keys)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from healthtwin.config import (
    AppConfig,
    ScoringConfig,
    StorageConfig,
    get_config,
    load_config_from_env,
)


@pytest.fixture(autouse=True)
def clear_config_cache() -> Iterator[None]:
    """Ensure get_config cache is cleared before and after each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_load_config_dev_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)
    monkeypatch.delenv("TWIN_FLOOR_SCORE_AT_ZERO", raising=False)
    monkeypatch.delenv("RECENT_EVENTS_LIMIT", raising=False)

    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.storage.backend == "file"
    assert config.scoring.floor_score_at_zero is True
    assert config.timeline.default_recent_limit == 10


def test_production_uses_json_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "prod")

    config = load_config_from_env()

    assert config.environment == "production"
    assert config.debug is False
    assert config.logging.format == "json"


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "staging")

    monkeypatch.setenv("LOG_LEVEL", "unknown")
    assert load_config_from_env().logging.level == "INFO"

    monkeypatch.setenv("LOG_LEVEL", "error")
    assert load_config_from_env().logging.level == "ERROR"


def test_storage_and_scoring_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("DATA_DIR", "/tmp/healthtwin")
    monkeypatch.setenv("TWIN_FLOOR_SCORE_AT_ZERO", "false")
    monkeypatch.setenv("RECENT_EVENTS_LIMIT", "25")

    config = load_config_from_env()

    assert config.storage.backend == "memory"
    assert config.storage.data_dir == "/tmp/healthtwin"
    assert config.scoring.floor_score_at_zero is False
    assert config.timeline.default_recent_limit == 25


def test_get_config_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")

    assert get_config() is get_config()


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(environment="production", debug=True)


def test_scoring_thresholds_must_be_ordered() -> None:
    with pytest.raises(ValueError, match="moderate_threshold"):
        ScoringConfig(moderate_threshold=70, high_threshold=30)


def test_scoring_defaults_match_rule_table() -> None:
    scoring = ScoringConfig()

    assert (scoring.emergency_points, scoring.emergency_window_days) == (30, 7)
    assert (scoring.inactivity_points, scoring.inactivity_days) == (5, 3)
    assert (scoring.missed_checkup_points, scoring.checkup_window_days) == (15, 30)
    assert (scoring.no_medication_points, scoring.active_adherence_points) == (5, -5)
    assert scoring.max_nudges == 3


def test_max_nudges_cannot_exceed_three() -> None:
    with pytest.raises(ValueError):
        ScoringConfig(max_nudges=4)


def test_storage_keys_must_be_distinct() -> None:
    with pytest.raises(ValueError, match="own storage key"):
        StorageConfig(timeline_key="shared", twin_key="shared")
