from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from planbox._rounding import round_half_up

from .daily import DailySeries
from .periods import DateLike, Granularity, Period, as_date, calculate_periods

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WeeklySplit:
    """Canonical storage form: one quantity and one lock flag per job week."""

    weekly_split: list[float]
    locked_weeks: list[bool]

    @property
    def total(self) -> float:
        return sum(self.weekly_split)


def _padded(values: Sequence, n: int, fill) -> list:
    values = list(values or ())
    return [values[i] if i < len(values) and values[i] is not None else fill for i in range(n)]


def convert_weekly_to_granularity(
    weekly_quantities: Sequence[float],
    locked_flags: Sequence[bool] | None,
    start: DateLike,
    end: DateLike,
    target_granularity: Granularity | str,
) -> list[Period]:
    """
    Present stored weekly quantities as periods of ``target_granularity``.

    Weekly targets map one to one and keep their locks. Any other target
    spreads each week evenly over its days and sums the days of each
    target period, rounded half-up and floored at zero. Locks do not
    survive that path.
    """
    target = Granularity.parse(target_granularity)
    weeks = calculate_periods(start, end, Granularity.WEEKLY)
    quantities = _padded(weekly_quantities, len(weeks), 0)
    locks = _padded(locked_flags, len(weeks), False)

    if target is Granularity.WEEKLY:
        return [
            dataclasses.replace(week, quantity=q, is_locked=bool(locked))
            for week, q, locked in zip(weeks, quantities, locks)
        ]

    series = DailySeries(as_date(start), as_date(end)).spread(
        dataclasses.replace(week, quantity=q) for week, q in zip(weeks, quantities)
    )
    targets = calculate_periods(start, end, target)
    totals = np.nan_to_num(series.totals(targets), nan=0.0)
    return [
        dataclasses.replace(period, quantity=max(0, round_half_up(total)), is_locked=False)
        for period, total in zip(targets, totals)
    ]


def convert_granularity_to_weekly(
    periods: Sequence[Period],
    start: DateLike,
    end: DateLike,
    current_granularity: Granularity | str,
    total_quantity: float,
) -> WeeklySplit:
    """
    Fold edited periods back into the weekly storage form.

    Non-weekly periods are spread over their days and re-summed per job
    week. Rounding drift against ``total_quantity`` is added in full to the
    last week. Weekly input passes through unchanged, locks included; from
    any other granularity every week comes back unlocked.
    """
    if Granularity.parse(current_granularity) is Granularity.WEEKLY:
        return WeeklySplit(
            weekly_split=[p.quantity for p in periods],
            locked_weeks=[bool(p.is_locked) for p in periods],
        )

    weeks = calculate_periods(start, end, Granularity.WEEKLY)
    series = DailySeries(as_date(start), as_date(end)).spread(periods)
    weekly = [round_half_up(total) for total in series.totals(weeks)]

    drift = total_quantity - sum(weekly)
    if drift and weekly:
        logger.debug("Adding rounding drift %s to the last of %d weeks", drift, len(weekly))
        weekly[-1] += drift

    return WeeklySplit(weekly_split=weekly, locked_weeks=[False] * len(weekly))
