"""Process-wide settings: environment variables over code defaults.

Priority chain (highest to lowest):
  1. Init kwargs:   values passed by the embedding application
  2. Env vars:      ``PLANBOX_*`` prefix, ``__`` between nested fields
  3. Code defaults: baked into the section models
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from planbox.config.models import AvailabilityConfig, MatchingConfig, ScoringConfig


class PlanboxSettings(BaseSettings):
    """Unified policy settings for the allocation core."""

    model_config = {
        "frozen": True,
        "env_prefix": "PLANBOX_",
        "env_nested_delimiter": "__",
    }

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    availability: AvailabilityConfig = Field(default_factory=AvailabilityConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)

    verbose: bool = False
    log_json: bool = False


@lru_cache(maxsize=1)
def get_settings() -> PlanboxSettings:
    """Return the cached settings; call ``get_settings.cache_clear()`` to reload."""
    return PlanboxSettings()
