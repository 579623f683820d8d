"""Tests for policy models and environment-backed settings."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from pydantic import ValidationError

from planbox.config import (
    AvailabilityConfig,
    MatchingConfig,
    PlanboxSettings,
    ScoringConfig,
    get_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestModels:
    def test_scoring_defaults(self) -> None:
        config = ScoringConfig()
        assert (config.capability_weight, config.utilization_weight, config.speed_weight) == (40, 30, 30)
        assert config.reference_speed == 10000

    def test_reference_speed_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ScoringConfig(reference_speed=0)

    def test_hours_per_day(self) -> None:
        assert AvailabilityConfig().hours_per_day == 16
        assert AvailabilityConfig(hours_per_shift=7.5, shifts_per_day=3).hours_per_day == 22.5

    def test_matching_defaults(self) -> None:
        config = MatchingConfig()
        assert config.neutral_score == 50
        assert config.excluded_parameters == {"process_type", "id", "job_id", "created_at"}

    def test_process_type_always_excluded(self) -> None:
        config = MatchingConfig(excluded_parameters=frozenset({"notes"}))
        assert config.excluded_parameters == {"notes", "process_type"}

    def test_neutral_score_bounded(self) -> None:
        with pytest.raises(ValidationError):
            MatchingConfig(neutral_score=150)

    def test_frozen(self) -> None:
        config = ScoringConfig()
        with pytest.raises(ValidationError):
            config.speed_weight = 10  # type: ignore[misc]


class TestSettings:
    def test_defaults(self) -> None:
        settings = PlanboxSettings()
        assert settings.scoring == ScoringConfig()
        assert settings.availability == AvailabilityConfig()
        assert settings.verbose is False

    def test_env_override_nested(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANBOX_SCORING__CAPABILITY_WEIGHT", "50")
        monkeypatch.setenv("PLANBOX_AVAILABILITY__SHIFTS_PER_DAY", "3")
        settings = PlanboxSettings()
        assert settings.scoring.capability_weight == 50
        assert settings.scoring.speed_weight == 30
        assert settings.availability.hours_per_day == 24

    def test_env_override_flat(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANBOX_LOG_JSON", "true")
        assert PlanboxSettings().log_json is True

    def test_init_kwargs_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANBOX_VERBOSE", "false")
        assert PlanboxSettings(verbose=True).verbose is True

    def test_invalid_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANBOX_SCORING__REFERENCE_SPEED", "-1")
        with pytest.raises(ValidationError):
            PlanboxSettings()

    def test_get_settings_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("PLANBOX_MATCHING__NEUTRAL_SCORE", "70")
        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings().matching.neutral_score == 70
