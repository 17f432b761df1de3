"""
Tests for leansim/utils/number_format.py and leansim/utils/time_utils.py.

What we test
------------
  - Half-away-from-zero rounding, also to a fixed number of decimals.
  - es-ES amount grouping: none for four digits, "." from five digits up.
  - Sign handling, NaN and infinities.
  - Quantity rendering for counts and months.
  - UTC helpers.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest

from leansim.utils.number_format import (
    format_amount,
    format_euro,
    format_fixed,
    format_quantity,
    round_half_up,
)
from leansim.utils.time_utils import ensure_utc, utcnow


class TestRounding:
    @pytest.mark.parametrize("value,expected", [
        (0.5, 1), (1.5, 2), (2.5, 3), (-0.5, -1), (-2.5, -3), (2.4, 2), (0.0, 0),
    ])
    def test_half_away_from_zero(self, value, expected):
        assert round_half_up(value) == expected


class TestFormatFixed:
    @pytest.mark.parametrize("value,decimals,expected", [
        (12.5, 0, "13"),
        (0.5, 0, "1"),
        (2.5, 0, "3"),
        (14.2857, 0, "14"),
        (6.25, 1, "6.3"),
        (5.0, 1, "5.0"),
        (-2.5, 0, "-3"),
    ])
    def test_halves_away_from_zero(self, value, decimals, expected):
        assert format_fixed(value, decimals) == expected

    def test_non_finite(self):
        assert format_fixed(math.nan, 1) == "0"
        assert format_fixed(math.inf) == "∞"
        assert format_fixed(-math.inf) == "-∞"

    def test_large_percentages(self):
        assert format_fixed(1e30) == str(int(1e30))


class TestFormatAmount:
    @pytest.mark.parametrize("value,expected", [
        (0, "0"),
        (250, "250"),
        (1250.4, "1250"),
        (9999.5, "10.000"),
        (12500, "12.500"),
        (1234567, "1.234.567"),
        (-12500, "-12.500"),
        (-600, "-600"),
        (-0.4, "0"),
        (math.nan, "0"),
        (math.inf, "∞"),
        (-math.inf, "-∞"),
    ])
    def test_amounts(self, value, expected):
        assert format_amount(value) == expected

    def test_huge_values_do_not_raise(self):
        assert format_amount(-1e200).count(".") == 66
        assert round_half_up(1e300) == int(1e300)

    def test_euro_suffix(self):
        assert format_euro(1250) == "1250€"
        assert format_euro(30000) == "30.000€"


class TestFormatQuantity:
    @pytest.mark.parametrize("value,expected", [
        (12.0, "12"), (0, "0"), (0.4, "0.4"), (14.25, "14.25"), (6.25, "6.25"), (math.inf, "∞"),
    ])
    def test_quantities(self, value, expected):
        assert format_quantity(value) == expected


class TestTimeUtils:
    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo == timezone.utc

    def test_ensure_utc_naive(self):
        assert ensure_utc(datetime(2025, 1, 1)).tzinfo == timezone.utc

    def test_ensure_utc_converts(self):
        plus_two = timezone(timedelta(hours=2))
        converted = ensure_utc(datetime(2025, 1, 1, 12, tzinfo=plus_two))
        assert converted.hour == 10
        assert converted.tzinfo == timezone.utc
