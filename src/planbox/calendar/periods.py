from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Union

import numpy as np

from planbox._exceptions import InvalidInputError

DateLike = Union[int, float, date, datetime, np.datetime64]

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class Granularity(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"

    @classmethod
    def parse(cls, value: Granularity | str) -> Granularity:
        try:
            return cls(value)
        except (ValueError, TypeError):
            allowed = ", ".join(g.value for g in cls)
            raise InvalidInputError(
                f"Unknown granularity {value!r}; expected one of: {allowed}."
            ) from None


@dataclass(frozen=True, slots=True)
class Period:
    """One bucket of a time distribution; both dates are inclusive."""

    start_date: date
    end_date: date
    label: str
    quantity: float = 0
    is_locked: bool = False

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise InvalidInputError(
                f"Period {self.label!r} ends ({self.end_date}) before it starts ({self.start_date})."
            )

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


def as_date(value: DateLike) -> date:
    """
    Calendar date for a caller-supplied time value.

    Numbers are epoch milliseconds and resolve to the UTC date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, np.datetime64):
        return value.astype("datetime64[D]").item()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()
    raise InvalidInputError(f"Cannot interpret {value!r} as a date.")


def day_label(day: date) -> str:
    return f"{day.month}/{day.day}"


def month_label(day: date) -> str:
    return f"{_MONTHS[day.month - 1]} {day.year % 100:02d}"


def quarter_label(year: int, quarter: int) -> str:
    return f"Q{quarter + 1} {year % 100:02d}"


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


# ── period builders ──────────────────────────────────────────────────────

def _daily(start: date, end: date) -> list[Period]:
    return [
        Period(day, day, day_label(day))
        for day in (start + timedelta(days=i) for i in range((end - start).days + 1))
    ]


def _weekly(start: date, end: date) -> list[Period]:
    # Seven-day spans anchored at the job start, not at calendar weeks.
    periods = []
    cursor = start
    while cursor <= end:
        periods.append(Period(cursor, min(cursor + timedelta(days=6), end), day_label(cursor)))
        cursor += timedelta(days=7)
    return periods


def _monthly(start: date, end: date) -> list[Period]:
    periods = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        first = date(year, month, 1)
        periods.append(
            Period(max(first, start), min(_month_end(year, month), end), month_label(first))
        )
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return periods


def _quarterly(start: date, end: date) -> list[Period]:
    periods = []
    year, quarter = start.year, (start.month - 1) // 3
    while (year, quarter) <= (end.year, (end.month - 1) // 3):
        first = date(year, quarter * 3 + 1, 1)
        last = _month_end(year, quarter * 3 + 3)
        periods.append(Period(max(first, start), min(last, end), quarter_label(year, quarter)))
        year, quarter = (year + 1, 0) if quarter == 3 else (year, quarter + 1)
    return periods


_BUILDERS = {
    Granularity.DAILY: _daily,
    Granularity.WEEKLY: _weekly,
    Granularity.MONTHLY: _monthly,
    Granularity.QUARTERLY: _quarterly,
}


def calculate_periods(
    start: DateLike,
    end: DateLike,
    granularity: Granularity | str,
) -> list[Period]:
    """
    Buckets covering ``start``..``end`` (inclusive) at ``granularity``,
    with zero quantities. Months and quarters are calendar-aligned and
    clipped to the range; weeks run in 7-day steps from ``start``.
    An empty list comes back when ``end`` precedes ``start``.
    """
    builder = _BUILDERS[Granularity.parse(granularity)]
    first, last = as_date(start), as_date(end)
    if last < first:
        return []
    return builder(first, last)


def week_ranges(start: DateLike, count: int = 6) -> list[Period]:
    """``count`` consecutive full weeks from ``start``, for projection views."""
    if count < 1:
        raise InvalidInputError("Week range count must be at least 1.")
    first = as_date(start)
    return [
        Period(first + timedelta(days=7 * i), first + timedelta(days=7 * i + 6),
               day_label(first + timedelta(days=7 * i)))
        for i in range(count)
    ]
