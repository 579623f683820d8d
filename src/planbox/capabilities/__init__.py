"""
planbox.capabilities
~~~~~~~~~~~~~~~~~~~~

Compare one job requirement against a machine's declared capabilities.

A capability value takes one of four shapes, each with its own test:

    ["6x9", "10x13"]          option list   -> membership
    {"min": 2, "max": 6}       numeric range -> inclusive bounds
    True                       flag          -> required value must be truthy
    "standard"                 scalar        -> case-insensitive equality

Basic usage::

    from planbox.capabilities import match_capability

    caps = {"supported_paper_sizes": ["6x9", "10x13"], "min_pockets": 2, "max_pockets": 6}
    match_capability("paper_size", "10x13", caps).matches    # True
    match_capability("pockets", 8, caps).reason              # '✗ 8 is outside machine range [2 to 6]'

The capability key is found through an ordered chain of naming strategies
(``paper_size`` -> ``supported_paper_sizes``, ``min_pockets``/``max_pockets``
-> a range, ``paperSize`` ...). Extra conventions can be registered::

    from planbox.capabilities import KeyResolver, ResolutionStrategy

    resolver = KeyResolver()
    resolver.register(ResolutionStrategy("legacy", my_lookup), before="camel_case")
    match_capability("paper_size", "6x9", caps, resolver=resolver)
"""

from planbox.capabilities.matcher import CapabilityMatch, match_capability
from planbox.capabilities.resolution import (
    DEFAULT_STRATEGIES,
    KeyResolver,
    Resolution,
    ResolutionStrategy,
    default_resolver,
)
from planbox.capabilities.validation import validate_capabilities

__all__ = [
    "CapabilityMatch",
    "DEFAULT_STRATEGIES",
    "KeyResolver",
    "Resolution",
    "ResolutionStrategy",
    "default_resolver",
    "match_capability",
    "validate_capabilities",
]
