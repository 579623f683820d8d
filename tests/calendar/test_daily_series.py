"""
tests/calendar/test_daily_series.py

Covers:
  - Construction, length and repr
  - fill / spread
  - Span totals and clipping to the series range
"""

from datetime import date

import numpy as np
import pytest

from planbox.calendar import DailySeries, Period


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def series():
    # 1..10 January 2025
    return DailySeries(date(2025, 1, 1), date(2025, 1, 10))


# ── Construction ──────────────────────────────────────────────────────────────

class TestConstruction:

    def test_len(self, series):
        assert len(series) == 10
        assert series.total == 0

    def test_inverted_range_is_empty(self):
        empty = DailySeries(date(2025, 1, 10), date(2025, 1, 1))
        assert len(empty) == 0
        assert empty.fill(100).total == 0

    def test_repr(self, series):
        assert repr(series.fill(100)) == "DailySeries(start=2025-01-01, days=10, total=100)"

    def test_values_are_a_copy(self, series):
        series.values[0] = 99
        assert series.total == 0


# ── Filling ───────────────────────────────────────────────────────────────────

class TestFilling:

    def test_fill(self, series):
        series.fill(100)
        assert np.allclose(series.values, 10)
        assert series.total == pytest.approx(100)

    def test_spread(self, series):
        series.spread([
            Period(date(2025, 1, 1), date(2025, 1, 2), "a", quantity=20),
            Period(date(2025, 1, 3), date(2025, 1, 7), "b", quantity=50),
        ])
        assert series.values.tolist() == [10, 10, 10, 10, 10, 10, 10, 0, 0, 0]

    def test_spread_clips_outside_days(self, series):
        # the period has 4 days, only 2 of them in the series
        series.spread([Period(date(2024, 12, 30), date(2025, 1, 2), "a", quantity=40)])
        assert series.total == pytest.approx(20)

    def test_spread_period_outside_series(self, series):
        series.spread([Period(date(2025, 2, 1), date(2025, 2, 5), "late", quantity=50)])
        assert series.total == 0


# ── Queries ───────────────────────────────────────────────────────────────────

class TestQueries:

    def test_total_between(self, series):
        series.fill(100)
        assert series.total_between(date(2025, 1, 1), date(2025, 1, 5)) == pytest.approx(50)
        assert series.total_between(date(2025, 1, 10), date(2025, 1, 10)) == pytest.approx(10)

    def test_clipped_spans(self, series):
        series.fill(100)
        assert series.total_between(date(2024, 12, 25), date(2025, 1, 2)) == pytest.approx(20)
        assert series.total_between(date(2025, 1, 9), date(2025, 3, 1)) == pytest.approx(20)
        assert series.total_between(date(2025, 2, 1), date(2025, 2, 5)) == 0
        assert series.total_between(date(2024, 1, 1), date(2024, 1, 5)) == 0

    def test_days_between(self, series):
        assert series.days_between(date(2025, 1, 8), date(2025, 1, 20)) == 3
        assert series.days_between(date(2025, 2, 1), date(2025, 2, 5)) == 0

    def test_totals(self, series):
        series.fill(100)
        periods = [
            Period(date(2025, 1, 1), date(2025, 1, 3), "a"),
            Period(date(2025, 1, 4), date(2025, 1, 10), "b"),
        ]
        assert series.totals(periods).tolist() == pytest.approx([30, 70])
