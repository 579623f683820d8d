from __future__ import annotations

import dataclasses
import logging
from typing import Sequence

from planbox._rounding import round_half_up

from .daily import DailySeries
from .periods import DateLike, Period, as_date

logger = logging.getLogger(__name__)


def distribute_quantity(
    total_quantity: float,
    start: DateLike,
    end: DateLike,
    periods: Sequence[Period],
) -> list[Period]:
    """
    Spread a job's quantity evenly over its days and report each period's share.

    Every job day carries ``total_quantity / job_days``. A period receives
    the days of the job that fall inside it, rounded half-up. The rounding
    residual goes to the last period that holds at least one job day, so
    the periods add up to the job's share they cover: the whole quantity
    when they cover the whole job. Periods outside the job get zero.
    """
    first, last = as_date(start), as_date(end)
    series = DailySeries(first, last)
    if not total_quantity or total_quantity < 0 or not len(series):
        return [dataclasses.replace(p, quantity=0) for p in periods]

    series.fill(total_quantity)
    shares = series.totals(periods)
    quantities = [round_half_up(share) for share in shares]

    covered = [i for i, p in enumerate(periods) if series.days_between(p.start_date, p.end_date)]
    if covered:
        residual = round_half_up(float(shares.sum())) - sum(quantities)
        if residual:
            logger.debug("Reconciling rounding residual %d onto period %d", residual, covered[-1])
            quantities[covered[-1]] += residual

    return [dataclasses.replace(p, quantity=q) for p, q in zip(periods, quantities)]
