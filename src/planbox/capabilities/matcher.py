from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Mapping

from .resolution import KeyResolver, default_resolver

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True, slots=True)
class CapabilityMatch:
    """Outcome of testing one job requirement against one machine capability."""

    parameter: str
    required: Any
    machine_capability: Any
    matches: bool
    reason: str
    # Capability key the parameter resolved to, None when nothing resolved.
    key: str | None = None


def to_number(value: Any) -> float | None:
    """
    Lenient numeric coercion: numbers pass through, strings are read up to
    the first non-numeric character ("6 pockets" -> 6.0). Booleans, NaN and
    anything unreadable give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        m = _LEADING_NUMBER.match(value)
        if m is None:
            return None
        number = float(m.group(0))
    else:
        return None
    return None if math.isnan(number) else number


def display(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(display(v) for v in value)
    return str(value)


def is_truthy(value: Any) -> bool:
    """Only ``True``, ``"true"`` and the number 1 count as a yes."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value == "true"
    return isinstance(value, (int, float)) and value == 1


def is_range(value: Any) -> bool:
    return isinstance(value, Mapping) and (
        value.get("min") is not None or value.get("max") is not None
    )


def _is_options(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


def _bounds_label(low: float | None, high: float | None) -> str:
    lo = "-∞" if low is None else display(low)
    hi = "∞" if high is None else display(high)
    return f"[{lo} to {hi}]"


def _match_options(parameter: str, required: Any, options: Any, key: str) -> CapabilityMatch:
    matches = any(required == option for option in options)
    if matches:
        reason = f"✓ Machine supports {parameter}: {display(required)}"
    else:
        reason = (
            f"✗ Machine doesn't support {parameter}: {display(required)} "
            f"(supports: {display(options)})"
        )
    return CapabilityMatch(parameter, required, options, matches, reason, key)


def _match_range(parameter: str, required: Any, bounds: Mapping[str, Any], key: str) -> CapabilityMatch:
    value = to_number(required)
    if value is None:
        return CapabilityMatch(
            parameter,
            required,
            bounds,
            False,
            f"✗ Cannot compare non-numeric value {display(required)} to range",
            key,
        )

    low = to_number(bounds.get("min"))
    high = to_number(bounds.get("max"))
    matches = (low is None or value >= low) and (high is None or value <= high)
    where = "within" if matches else "outside"
    mark = "✓" if matches else "✗"
    return CapabilityMatch(
        parameter,
        required,
        bounds,
        matches,
        f"{mark} {display(required)} is {where} machine range {_bounds_label(low, high)}",
        key,
    )


def _match_flag(parameter: str, required: Any, flag: bool, key: str) -> CapabilityMatch:
    matches = flag is True and is_truthy(required)
    reason = (
        f"✓ Machine has {parameter} capability"
        if matches
        else f"✗ Machine doesn't have {parameter} capability"
    )
    return CapabilityMatch(parameter, required, flag, matches, reason, key)


def _match_scalar(parameter: str, required: Any, value: Any, key: str) -> CapabilityMatch:
    matches = display(value).lower() == display(required).lower()
    reason = (
        f"✓ Machine {parameter} matches: {display(required)}"
        if matches
        else f"✗ Machine {parameter} is {display(value)}, required {display(required)}"
    )
    return CapabilityMatch(parameter, required, value, matches, reason, key)


def match_capability(
    parameter: str,
    required_value: Any,
    machine_capabilities: Mapping[str, Any] | None,
    resolver: KeyResolver = default_resolver,
) -> CapabilityMatch:
    """
    Test one job requirement against a machine's capability map.

    The capability is looked up through ``resolver`` and then compared by
    shape: option list (membership), ``{min, max}`` range (inclusive, open
    where a bound is absent), boolean flag, or scalar (case-insensitive).
    Never raises for data that simply does not match.
    """
    found = resolver.resolve(parameter, machine_capabilities)
    if found is None:
        logger.debug("No capability key resolves parameter %r", parameter)
        return CapabilityMatch(
            parameter,
            required_value,
            None,
            False,
            f"Machine has no {parameter} capability defined",
        )

    value = found.value
    if _is_options(value):
        return _match_options(parameter, required_value, value, found.key)
    if is_range(value):
        return _match_range(parameter, required_value, value, found.key)
    if isinstance(value, bool):
        return _match_flag(parameter, required_value, value, found.key)
    return _match_scalar(parameter, required_value, value, found.key)
