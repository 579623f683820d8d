"""
planbox.config
~~~~~~~~~~~~~~

Policy constants and logging setup for the allocation core.

Every engine function that relies on a policy constant (score weights,
shift hours, the speed reference ceiling) takes an optional config
argument; when omitted the process-wide settings are used::

    from planbox.config import get_settings

    settings = get_settings()
    settings.scoring.reference_speed      # 10000.0

Overrides come from ``PLANBOX_*`` environment variables, nested with a
double underscore::

    PLANBOX_SCORING__REFERENCE_SPEED=12000
    PLANBOX_AVAILABILITY__SHIFTS_PER_DAY=3
"""

from planbox.config.logging import configure_logging
from planbox.config.models import AvailabilityConfig, MatchingConfig, ScoringConfig
from planbox.config.settings import PlanboxSettings, get_settings

__all__ = [
    "AvailabilityConfig",
    "MatchingConfig",
    "PlanboxSettings",
    "ScoringConfig",
    "configure_logging",
    "get_settings",
]
