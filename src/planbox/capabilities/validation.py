from __future__ import annotations

from typing import Any, Mapping

from .matcher import display, to_number


def _check_number(field: str, value: Any) -> list[str]:
    if value is None or value == "":
        return []
    number = to_number(value)
    if number is None:
        return [f"{field} must be a valid number"]
    if number < 0:
        return [f"{field} must be at least 0"]
    return []


def _check_order(low_field: str, low: Any, high_field: str, high: Any) -> list[str]:
    lo, hi = to_number(low), to_number(high)
    if lo is not None and hi is not None and lo > hi:
        return [f"{low_field} ({display(lo)}) cannot be greater than {high_field} ({display(hi)})"]
    return []


def validate_capabilities(capabilities: Mapping[str, Any] | None) -> list[str]:
    """
    Structural checks for a machine capability map.

    Only the shapes the matcher relies on are checked: numeric, ordered
    and non-negative range bounds, paired ``min_<p>``/``max_<p>`` keys in
    order, and option lists made of scalars. Which parameters a process
    type defines is configured elsewhere and not enforced here.

    Returns a list of human-readable issues, empty when the map is sound.
    """
    issues: list[str] = []
    if not capabilities:
        return issues

    for key, value in capabilities.items():
        if isinstance(value, Mapping):
            if "min" not in value and "max" not in value:
                continue
            issues += _check_number(f"{key}.min", value.get("min"))
            issues += _check_number(f"{key}.max", value.get("max"))
            issues += _check_order(f"{key}.min", value.get("min"), f"{key}.max", value.get("max"))
        elif isinstance(value, (list, tuple)):
            nested = [v for v in value if isinstance(v, (list, tuple, Mapping))]
            if nested:
                issues.append(f"{key} must be a list of plain values")
        elif key.startswith(("min_", "max_")):
            issues += _check_number(key, value)
            if key.startswith("min_"):
                partner = "max_" + key[len("min_"):]
                if partner in capabilities:
                    issues += _check_order(key, value, partner, capabilities[partner])

    return issues
