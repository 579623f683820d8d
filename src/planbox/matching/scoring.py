from __future__ import annotations

from planbox._rounding import round_half_up
from planbox.capacity import parse_speed_per_hour
from planbox.config import ScoringConfig, get_settings

from .models import Machine


def capability_term(requirements_score: float, config: ScoringConfig) -> float:
    return requirements_score / 100 * config.capability_weight


def utilization_term(utilization_percent: float, config: ScoringConfig) -> float:
    # Idle machines earn the full weight, fully booked ones nothing.
    return max(0.0, config.utilization_weight - utilization_percent / 100 * config.utilization_weight)


def speed_term(speed: float, config: ScoringConfig) -> float:
    return min(config.speed_weight, speed / config.reference_speed * config.speed_weight)


def score_machine(
    machine: Machine,
    requirements_score: float,
    utilization_percent: float,
    config: ScoringConfig | None = None,
) -> int:
    """
    Composite 0-100 ranking score.

    Capability fit, spare capacity and raw machine speed contribute up to
    40, 30 and 30 points by default. The speed term uses the machine's base
    speed against ``reference_speed``, not the rule-adjusted speed.
    """
    config = config or get_settings().scoring
    total = (
        capability_term(requirements_score, config)
        + utilization_term(utilization_percent, config)
        + speed_term(parse_speed_per_hour(machine.speed_hr), config)
    )
    return round_half_up(total)
