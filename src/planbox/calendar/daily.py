from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

import numpy as np

from .periods import Period


class DailySeries:
    """
    Per-day quantities over an inclusive date range: a dense value array
    plus its prefix sum, so the total of any day span is two lookups.

    Every granularity conversion goes through one of these: source periods
    are spread evenly over their days, target periods are summed back.
    Days outside the range carry nothing.
    """

    def __init__(self, start: date, end: date) -> None:
        self._origin: date = start
        self._n: int = max((end - start).days + 1, 0)
        self._values: np.ndarray = np.zeros(self._n, dtype=float)
        self._build_prefix()

    # ── prefix management ────────────────────────────────────────────────

    def _build_prefix(self) -> None:
        self._prefix = np.empty(self._n + 1, dtype=float)
        self._prefix[0] = 0.0
        np.cumsum(self._values, out=self._prefix[1:])

    def _span(self, start: date, end: date) -> tuple[int, int]:
        """Half-open index span of ``start``..``end`` clipped to the series."""
        lo = min(max((start - self._origin).days, 0), self._n)
        hi = min((end - self._origin).days + 1, self._n)
        return lo, max(hi, lo)

    # ── filling ──────────────────────────────────────────────────────────

    def spread(self, periods: Iterable[Period]) -> DailySeries:
        """Give each day of each period ``quantity / days`` of its period."""
        for period in periods:
            lo, hi = self._span(period.start_date, period.end_date)
            if hi > lo:
                self._values[lo:hi] = period.quantity / period.days
        self._values[~np.isfinite(self._values)] = 0.0
        self._build_prefix()
        return self

    def fill(self, total: float) -> DailySeries:
        """Spread ``total`` evenly over every day of the series."""
        if self._n:
            self._values[:] = total / self._n
        self._build_prefix()
        return self

    # ── queries ──────────────────────────────────────────────────────────

    def total_between(self, start: date, end: date) -> float:
        lo, hi = self._span(start, end)
        return float(self._prefix[hi] - self._prefix[lo])

    def days_between(self, start: date, end: date) -> int:
        lo, hi = self._span(start, end)
        return hi - lo

    def totals(self, periods: Sequence[Period]) -> np.ndarray:
        return np.array([self.total_between(p.start_date, p.end_date) for p in periods], dtype=float)

    @property
    def values(self) -> np.ndarray:
        return self._values.copy()

    @property
    def total(self) -> float:
        return float(self._prefix[self._n])

    def __len__(self) -> int:
        return self._n

    def __repr__(self) -> str:
        return (
            f"DailySeries(start={self._origin.isoformat()}, "
            f"days={self._n}, "
            f"total={self.total:g})"
        )
