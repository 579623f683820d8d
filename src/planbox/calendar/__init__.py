"""
planbox.calendar
~~~~~~~~~~~~~~~~

Calendar periods and the distribution of a job's quantity across them.

A job's quantity is stored as one value per job week (weeks run in 7-day
steps from the job's start date). Daily, monthly and quarterly views are
derived from the weekly split by spreading each week evenly over its days
and re-summing the days of each target period.

Basic usage::

    from datetime import date
    from planbox.calendar import calculate_periods, convert_weekly_to_granularity

    start, end = date(2025, 1, 27), date(2025, 2, 9)
    calculate_periods(start, end, "monthly")       # [Jan 25 (27-31), Feb 25 (1-9)]

    months = convert_weekly_to_granularity([700, 700], [True, False], start, end, "monthly")
    [p.quantity for p in months]                   # [500, 900]

Going back to storage::

    from planbox.calendar import convert_granularity_to_weekly

    split = convert_granularity_to_weekly(months, start, end, "monthly", 1400)
    split.weekly_split                             # [700, 700]

Public API
----------
Granularity                     daily / weekly / monthly / quarterly.
Period                          One bucket: dates, label, quantity, lock.
calculate_periods, week_ranges  Build empty buckets.
convert_weekly_to_granularity   Weekly storage -> any view.
convert_granularity_to_weekly   Any view -> weekly storage.
distribute_quantity             Even spread of a total over given buckets.
DailySeries                     Per-day quantities with prefix-sum lookups.
"""

from planbox.calendar.conversion import (
    WeeklySplit,
    convert_granularity_to_weekly,
    convert_weekly_to_granularity,
)
from planbox.calendar.daily import DailySeries
from planbox.calendar.distribution import distribute_quantity
from planbox.calendar.periods import (
    DateLike,
    Granularity,
    Period,
    as_date,
    calculate_periods,
    week_ranges,
)

__all__ = [
    "DailySeries",
    "DateLike",
    "Granularity",
    "Period",
    "WeeklySplit",
    "as_date",
    "calculate_periods",
    "convert_granularity_to_weekly",
    "convert_weekly_to_granularity",
    "distribute_quantity",
    "week_ranges",
]
