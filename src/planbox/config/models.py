"""Pydantic policy models with code-baked defaults.

The defaults reproduce the production planning behaviour; environment
overrides only need to name the values that change.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ScoringConfig(BaseModel):
    """Composite ranking score for candidate machines."""

    model_config = {"frozen": True}

    capability_weight: float = 40.0
    utilization_weight: float = 30.0
    speed_weight: float = 30.0
    # Speed at which a machine earns the full speed term.
    reference_speed: float = Field(default=10000.0, gt=0)


class AvailabilityConfig(BaseModel):
    """Naive per-day hours model used for availability estimates."""

    model_config = {"frozen": True}

    hours_per_shift: float = Field(default=8.0, gt=0)
    shifts_per_day: int = Field(default=2, ge=1)
    # Hours an existing assignment is assumed to consume per overlap day.
    assumed_hours_per_assigned_day: float = Field(default=8.0, ge=0)

    @property
    def hours_per_day(self) -> float:
        return self.hours_per_shift * self.shifts_per_day


class MatchingConfig(BaseModel):
    """Requirement matching policy."""

    model_config = {"frozen": True}

    # Score reported when a job carries no capability requirements.
    neutral_score: int = Field(default=50, ge=0, le=100)
    excluded_parameters: frozenset[str] = frozenset(
        {"process_type", "id", "job_id", "created_at"}
    )

    @field_validator("excluded_parameters")
    @classmethod
    def _keep_process_type(cls, value: frozenset[str]) -> frozenset[str]:
        # Process type is checked up front and never counts as a requirement.
        return value | {"process_type"}
