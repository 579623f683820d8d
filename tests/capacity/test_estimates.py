"""
tests/capacity/test_estimates.py

Covers:
  - Speed parsing from numbers and text
  - Hours estimate and the zero-speed guard
"""

import pytest

from planbox.capacity import calculate_time_estimate, parse_speed_per_hour


class TestParseSpeed:

    @pytest.mark.parametrize("raw, expected", [
        (4000, 4000.0),
        (2.5, 2.5),
        ("10,000/hr", 10000.0),
        ("1500 pcs", 1500.0),
        ("12.5", 12.5),
        ("fast", 0.0),
        ("", 0.0),
        (None, 0.0),
        (True, 0.0),
        (float("nan"), 0.0),
    ])
    def test_parse(self, raw, expected):
        assert parse_speed_per_hour(raw) == expected


class TestTimeEstimate:

    def test_hours(self):
        assert calculate_time_estimate(12000, "4,000/hr") == 3.0

    def test_fractional(self):
        assert calculate_time_estimate(500, 1000) == 0.5

    @pytest.mark.parametrize("speed", [0, "", None, "n/a", -5])
    def test_no_speed(self, speed):
        assert calculate_time_estimate(1000, speed) == 0.0
