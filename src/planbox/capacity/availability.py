from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable, Mapping

from planbox._exceptions import InvalidInputError
from planbox._rounding import round_half_up
from planbox.calendar import DateLike, as_date
from planbox.config import AvailabilityConfig, get_settings

DAY_MS = 24 * 60 * 60 * 1000


@dataclass(frozen=True, slots=True)
class Assignment:
    """An existing job booked onto one or more machines (epoch ms, inclusive)."""

    machines_id: tuple[int, ...]
    start_date: float
    due_date: float
    quantity: float = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Assignment:
        try:
            machines = tuple(data.get("machines_id") or ())
            start_date, due_date = data["start_date"], data["due_date"]
        except (KeyError, TypeError, AttributeError) as exc:
            raise InvalidInputError(f"Malformed assignment {data!r}.") from exc
        return cls(
            machines_id=machines,
            start_date=start_date,
            due_date=due_date,
            quantity=data.get("quantity") or 0,
        )

    def overlap_days(self, start: float, end: float) -> int:
        """Whole days this assignment shares with ``[start, end]``; 0 when disjoint."""
        if self.due_date < start or self.start_date > end:
            return 0
        return window_days(max(self.start_date, start), min(self.due_date, end))


def _as_assignment(item: Assignment | Mapping[str, Any]) -> Assignment:
    return item if isinstance(item, Assignment) else Assignment.from_dict(item)


def window_days(start: float, end: float) -> int:
    """Days spanned by an epoch-ms window, rounded up, never negative."""
    return max(0, math.ceil((end - start) / DAY_MS))


def window_hours(start: float, end: float, config: AvailabilityConfig | None = None) -> float:
    config = config or get_settings().availability
    return window_days(start, end) * config.hours_per_day


def allocated_hours(
    machine_id: int,
    start: float,
    end: float,
    assignments: Iterable[Assignment | Mapping[str, Any]] | None,
    config: AvailabilityConfig | None = None,
) -> float:
    """
    Hours already booked on ``machine_id`` inside the window.

    Each overlapping assignment is charged a flat number of hours per
    overlap day, whatever its own quantity or speed.
    """
    config = config or get_settings().availability
    total = 0.0
    for assignment in map(_as_assignment, assignments or ()):
        if machine_id not in assignment.machines_id:
            continue
        total += assignment.overlap_days(start, end) * config.assumed_hours_per_assigned_day
    return total


def calculate_machine_availability(
    machine_id: int,
    start: float,
    end: float,
    assignments: Iterable[Assignment | Mapping[str, Any]] | None = None,
    config: AvailabilityConfig | None = None,
) -> float:
    """Free hours left on ``machine_id`` between ``start`` and ``end`` (epoch ms)."""
    config = config or get_settings().availability
    total = window_hours(start, end, config)
    booked = allocated_hours(machine_id, start, end, assignments, config)
    return max(0.0, total - booked)


def calculate_current_utilization(allocated: float, available: float) -> int:
    """Percent of ``available`` hours that are ``allocated``, capped at 100."""
    if available == 0:
        return 100
    return min(100, round_half_up(allocated / available * 100))


def distribute_hours_across_days(total_hours: float, start: DateLike, end: DateLike) -> dict[date, float]:
    """
    Spread a job's hours evenly over the calendar days from ``start`` to ``end``.

    Both end days count. An ``end`` before ``start`` gives an empty mapping.
    """
    first, last = as_date(start), as_date(end)
    days = (last - first).days + 1
    if days <= 0:
        return {}
    share = total_hours / days
    return {first + timedelta(days=i): share for i in range(days)}
