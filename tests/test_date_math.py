"""Tests for src.core.date_math — rollover date arithmetic."""

from datetime import date

import pytest

from src.core.date_math import add_months, is_weekend, rolled_date, sunday_index


class TestRolledDate:
    @pytest.mark.parametrize("args,expected", [
        ((2026, 10, 14), date(2026, 10, 14)),
        ((2024, 2, 31), date(2024, 3, 2)),
        ((2025, 2, 31), date(2025, 3, 3)),
        ((2026, 13, 1), date(2027, 1, 1)),
        ((2026, 0, 15), date(2025, 12, 15)),
        ((2026, 3, 0), date(2026, 2, 28)),
        ((2026, 12, 32), date(2027, 1, 1)),
    ])
    def test_rollover(self, args, expected):
        assert rolled_date(*args) == expected

    def test_out_of_range_returns_none(self):
        assert rolled_date(10000, 1, 1) is None
        assert rolled_date(9999, 12, 32) is None
        assert rolled_date(0, 5, 1) is None


class TestAddMonths:
    def test_keeps_day(self):
        assert add_months(date(2026, 10, 14), 1) == date(2026, 11, 14)

    def test_short_month_rolls_forward(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 3, 2)

    def test_forced_day(self):
        assert add_months(date(2026, 10, 14), 1, day=31) == date(2026, 12, 1)

    def test_negative(self):
        assert add_months(date(2026, 1, 15), -1) == date(2025, 12, 15)


class TestWeekdays:
    @pytest.mark.parametrize("d,index", [
        (date(2026, 10, 18), 0),  # Sunday
        (date(2026, 10, 19), 1),
        (date(2026, 10, 14), 3),
        (date(2026, 10, 17), 6),  # Saturday
    ])
    def test_sunday_index(self, d, index):
        assert sunday_index(d) == index

    def test_is_weekend(self):
        assert is_weekend(date(2026, 10, 17)) is True
        assert is_weekend(date(2026, 10, 18)) is True
        assert is_weekend(date(2026, 10, 16)) is False
