from __future__ import annotations

import re
from typing import Any

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_speed_per_hour(speed: Any) -> float:
    """
    Read a machine speed that may be stored as text ("10,000/hr").

    Everything except digits and the decimal point is dropped and the
    leading number is read; anything unreadable counts as 0.
    """
    if isinstance(speed, bool) or speed is None:
        return 0.0
    if isinstance(speed, (int, float)):
        return float(speed) if speed == speed else 0.0
    m = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", str(speed)))
    return float(m.group(0)) if m else 0.0


def calculate_time_estimate(quantity: float, speed: Any) -> float:
    """Hours needed to run ``quantity`` pieces at ``speed`` pieces/hour; 0 at zero speed."""
    rate = parse_speed_per_hour(speed)
    if rate <= 0:
        return 0.0
    return quantity / rate
