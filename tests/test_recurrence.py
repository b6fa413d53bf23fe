"""Tests for src.core.recurrence — next-occurrence resolution and descriptions."""

from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from src.core.recurrence import (
    RecurrenceConfig,
    RecurrencePattern,
    describe,
    format_time_12h,
    is_exhausted,
    next_occurrence,
    preset,
)

WEDNESDAY = date(2026, 10, 14)
FRIDAY = date(2026, 10, 16)


def _cfg(**kwargs) -> RecurrenceConfig:
    return RecurrenceConfig(**kwargs)


# ---------------------------------------------------------------------------
# RecurrenceConfig validation
# ---------------------------------------------------------------------------


class TestRecurrenceConfig:
    def test_minimal(self):
        config = _cfg(pattern="daily")
        assert config.pattern is RecurrencePattern.DAILY
        assert config.interval is None
        assert config.occurrences is None

    def test_days_of_week_coerced_to_frozenset(self):
        config = _cfg(pattern="custom", days_of_week=[5, 1, 1])
        assert config.days_of_week == frozenset({1, 5})

    def test_is_immutable(self):
        config = _cfg(pattern="daily")
        with pytest.raises(ValidationError):
            config.interval = 3

    @pytest.mark.parametrize("kwargs", [
        {"pattern": "yearly"},
        {"pattern": "daily", "interval": 0},
        {"pattern": "custom", "days_of_week": [7]},
        {"pattern": "monthly", "day_of_month": 32},
        {"pattern": "monthly", "day_of_month": 0},
        {"pattern": "daily", "time": "25:00"},
        {"pattern": "daily", "time": "9:00"},
        {"pattern": "daily", "occurrences": 0},
    ])
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            RecurrenceConfig(**kwargs)


# ---------------------------------------------------------------------------
# next_occurrence
# ---------------------------------------------------------------------------


class TestNone:
    @pytest.mark.parametrize("start", [WEDNESDAY, FRIDAY, datetime(2026, 12, 31, 23, 59)])
    def test_never_repeats(self, start):
        assert next_occurrence(_cfg(pattern="none"), start) is None


class TestDaily:
    def test_default_interval(self):
        assert next_occurrence(_cfg(pattern="daily"), WEDNESDAY) == datetime(2026, 10, 15)

    def test_interval(self):
        assert next_occurrence(_cfg(pattern="daily", interval=3), WEDNESDAY) == datetime(2026, 10, 17)

    def test_truncates_reference_to_midnight(self):
        result = next_occurrence(_cfg(pattern="daily"), datetime(2026, 10, 14, 18, 45, 12))
        assert result == datetime(2026, 10, 15, 0, 0)

    def test_overlays_time(self):
        result = next_occurrence(_cfg(pattern="daily", interval=3, time="09:30"), WEDNESDAY)
        assert result == datetime(2026, 10, 17, 9, 30)

    def test_defaults_to_clock(self, clock):
        assert next_occurrence(_cfg(pattern="daily"), clock=clock) == datetime(2026, 10, 15)


class TestWeekdays:
    def test_friday_goes_to_monday(self):
        assert next_occurrence(_cfg(pattern="weekdays"), FRIDAY) == datetime(2026, 10, 19)

    @pytest.mark.parametrize("start", [date(2026, 10, 17), date(2026, 10, 18)])
    def test_weekend_goes_to_monday(self, start):
        assert next_occurrence(_cfg(pattern="weekdays"), start) == datetime(2026, 10, 19)

    def test_midweek_goes_to_next_day(self):
        assert next_occurrence(_cfg(pattern="weekdays"), WEDNESDAY) == datetime(2026, 10, 15)

    def test_never_lands_on_weekend(self):
        for offset in range(28):
            result = next_occurrence(_cfg(pattern="weekdays"), WEDNESDAY + timedelta(days=offset))
            assert result.weekday() < 5


class TestWeekly:
    @pytest.mark.parametrize("kwargs,days", [
        ({"pattern": "weekly"}, 7),
        ({"pattern": "weekly", "interval": 1}, 7),
        ({"pattern": "weekly", "interval": 2}, 14),
        ({"pattern": "biweekly"}, 14),
        ({"pattern": "biweekly", "interval": 2}, 14),
        # Only an interval of exactly 2 means two weeks
        ({"pattern": "weekly", "interval": 3}, 7),
        ({"pattern": "biweekly", "interval": 3}, 7),
    ])
    def test_steps(self, kwargs, days):
        expected = datetime.combine(WEDNESDAY + timedelta(days=days), datetime.min.time())
        assert next_occurrence(_cfg(**kwargs), WEDNESDAY) == expected


class TestMonthly:
    def test_keeps_reference_day(self):
        assert next_occurrence(_cfg(pattern="monthly"), WEDNESDAY) == datetime(2026, 11, 14)

    def test_forces_day_of_month(self):
        result = next_occurrence(_cfg(pattern="monthly", day_of_month=5), WEDNESDAY)
        assert result == datetime(2026, 11, 5)

    def test_day_31_in_february_rolls_into_march(self):
        # Feb 2024 has 29 days: "Feb 31" overflows two days into March
        result = next_occurrence(_cfg(pattern="monthly", day_of_month=31), date(2024, 1, 31))
        assert result == datetime(2024, 3, 2)

    def test_day_31_in_thirty_day_month(self):
        result = next_occurrence(_cfg(pattern="monthly", day_of_month=31), date(2026, 10, 31))
        assert result == datetime(2026, 12, 1)

    def test_december_crosses_year(self):
        result = next_occurrence(_cfg(pattern="monthly", time="08:00"), date(2026, 12, 10))
        assert result == datetime(2027, 1, 10, 8, 0)


class TestCustom:
    def test_interval_in_days(self):
        assert next_occurrence(_cfg(pattern="custom", interval=10), WEDNESDAY) == datetime(2026, 10, 24)

    def test_without_interval_does_not_advance(self):
        config = _cfg(pattern="custom", days_of_week=[1, 3])
        result = next_occurrence(config, datetime(2026, 10, 14, 16, 0))
        assert result == datetime(2026, 10, 14)


class TestEndConditions:
    def test_on_end_date_still_produced(self):
        config = _cfg(pattern="daily", end_date=date(2026, 10, 15), time="23:00")
        assert next_occurrence(config, WEDNESDAY) == datetime(2026, 10, 15, 23, 0)

    def test_after_end_date_ends(self):
        config = _cfg(pattern="daily", end_date=WEDNESDAY)
        assert next_occurrence(config, WEDNESDAY) is None

    def test_occurrence_cap_not_enforced_by_resolver(self):
        config = _cfg(pattern="daily", occurrences=1)
        assert next_occurrence(config, WEDNESDAY) == datetime(2026, 10, 15)

    def test_is_exhausted(self):
        config = _cfg(pattern="daily", occurrences=3)
        assert is_exhausted(config, 2) is False
        assert is_exhausted(config, 3) is True
        assert is_exhausted(_cfg(pattern="daily"), 1000) is False

    def test_beyond_representable_dates(self):
        assert next_occurrence(_cfg(pattern="daily"), date(9999, 12, 31)) is None
        assert next_occurrence(_cfg(pattern="monthly"), date(9999, 12, 15)) is None


# ---------------------------------------------------------------------------
# describe / presets
# ---------------------------------------------------------------------------


class TestDescribe:
    """Weekly schedules are labelled by the step the resolver takes, not by
    pattern name: weekly with interval 2 reads "Every 2 weeks" and biweekly
    with interval 1 reads "Every week", matching next_occurrence."""

    @pytest.mark.parametrize("kwargs,expected", [
        ({"pattern": "none", "time": "09:00"}, "Does not repeat"),
        ({"pattern": "daily"}, "Every day"),
        ({"pattern": "weekdays"}, "Every weekday"),
        ({"pattern": "weekly"}, "Every week"),
        ({"pattern": "weekly", "interval": 2}, "Every 2 weeks"),
        ({"pattern": "biweekly", "interval": 1}, "Every week"),
        ({"pattern": "biweekly", "time": "15:00"}, "Every 2 weeks at 3:00 PM"),
        ({"pattern": "monthly", "day_of_month": 5}, "Every month on day 5"),
        ({"pattern": "monthly"}, "Every month on day 1"),
        ({"pattern": "custom", "interval": 3}, "Every 3 days"),
        ({"pattern": "custom", "days_of_week": [3, 1]}, "On Mon, Wed"),
        ({"pattern": "custom", "interval": 1}, "Custom schedule"),
        ({"pattern": "daily", "time": "00:15"}, "Every day at 12:15 AM"),
    ])
    def test_descriptions(self, kwargs, expected):
        assert describe(_cfg(**kwargs)) == expected


class TestFormatTime12h:
    @pytest.mark.parametrize("value,expected", [
        ("00:00", "12:00 AM"),
        ("09:05", "9:05 AM"),
        ("12:30", "12:30 PM"),
        ("23:59", "11:59 PM"),
    ])
    def test_formats(self, value, expected):
        assert format_time_12h(value) == expected


class TestPreset:
    def test_weekly_uses_todays_weekday(self):
        config = preset("weekly", WEDNESDAY)
        assert config.interval == 1
        assert config.days_of_week == frozenset({3})

    def test_biweekly(self):
        config = preset(RecurrencePattern.BIWEEKLY, WEDNESDAY, at="07:00")
        assert config.interval == 2
        assert config.time == "07:00"
        assert describe(config) == "Every 2 weeks at 7:00 AM"

    def test_weekdays(self):
        assert preset("weekdays", WEDNESDAY).days_of_week == frozenset({1, 2, 3, 4, 5})

    def test_monthly_uses_todays_day(self):
        config = preset("monthly", WEDNESDAY)
        assert config.day_of_month == 14
        assert next_occurrence(config, WEDNESDAY) == datetime(2026, 11, 14)

    def test_none(self):
        assert preset("none", WEDNESDAY) == RecurrenceConfig(pattern="none")
