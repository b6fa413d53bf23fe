"""
Do.This Capture — Recurrence Resolver.

Computes the next occurrence of a repeating schedule described by a
RecurrenceConfig (what the recurrence picker produces), and renders the
human-readable description shown next to a recurring task.

Pure and stateless: the only input from the environment is "now", taken
from an injectable clock when no reference date is given.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from src.core.clock import Clock, system_clock
from src.core.date_math import add_months, is_weekend, sunday_index
from src.core.vocabulary import DAY_ABBREVIATIONS

logger = logging.getLogger(__name__)

_TIME_FORMAT = re.compile(r"^(\d{2}):(\d{2})$")


class RecurrencePattern(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class RecurrenceConfig(BaseModel):
    """Structured description of a repeat schedule.

    JSON example:
    {
        "pattern": "biweekly",
        "interval": 2,
        "days_of_week": [3],
        "day_of_month": null,
        "end_date": "2026-12-31",
        "occurrences": null,
        "time": "15:00"
    }
    """
    model_config = ConfigDict(frozen=True)

    pattern: RecurrencePattern
    interval: int | None = None                 # "every N"; implicit 1, biweekly 2
    days_of_week: frozenset[int] | None = None  # 0=Sun ... 6=Sat
    day_of_month: int | None = None             # 1..31, monthly only
    end_date: date | None = None                # nothing after this day
    occurrences: int | None = None              # cap, enforced by callers
    time: str | None = None                     # HH:MM applied to every occurrence

    @field_validator("interval", "occurrences")
    @classmethod
    def check_positive(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("days_of_week")
    @classmethod
    def check_days(cls, v: frozenset[int] | None) -> frozenset[int] | None:
        if v is not None and any(not 0 <= d <= 6 for d in v):
            raise ValueError("days of week must be between 0 (Sunday) and 6 (Saturday)")
        return v

    @field_validator("day_of_month")
    @classmethod
    def check_day_of_month(cls, v: int | None) -> int | None:
        if v is not None and not 1 <= v <= 31:
            raise ValueError("day of month must be between 1 and 31")
        return v

    @field_validator("time")
    @classmethod
    def check_time(cls, v: str | None) -> str | None:
        if v is None:
            return v
        match = _TIME_FORMAT.match(v)
        if not match or int(match.group(1)) > 23 or int(match.group(2)) > 59:
            raise ValueError(f"time must be HH:MM in 24h format, got {v!r}")
        return v


def _parse_hhmm(value: str) -> time:
    hour, minute = map(int, value.split(":"))
    return time(hour, minute)


def _effective_interval(config: RecurrenceConfig) -> int | None:
    if config.interval is not None:
        return config.interval
    if config.pattern == RecurrencePattern.BIWEEKLY:
        return 2
    if config.pattern == RecurrencePattern.DAILY:
        return 1
    return None


def _advance(config: RecurrenceConfig, start: date) -> date | None:
    """Whole-day arithmetic for one cadence step."""
    pattern = config.pattern

    if pattern == RecurrencePattern.DAILY:
        return start + timedelta(days=_effective_interval(config))

    if pattern == RecurrencePattern.WEEKDAYS:
        nxt = start + timedelta(days=1)
        while is_weekend(nxt):
            nxt += timedelta(days=1)
        return nxt

    if pattern in (RecurrencePattern.WEEKLY, RecurrencePattern.BIWEEKLY):
        weeks = 2 if _effective_interval(config) == 2 else 1
        return start + timedelta(weeks=weeks)

    if pattern == RecurrencePattern.MONTHLY:
        # A day the target month lacks rolls into the month after
        return add_months(start, 1, config.day_of_month)

    if pattern == RecurrencePattern.CUSTOM:
        if config.interval is None:
            logger.warning("Custom recurrence without interval does not advance from %s", start)
            return start
        return start + timedelta(days=config.interval)

    return None


def next_occurrence(
    config: RecurrenceConfig,
    from_: datetime | date | None = None,
    clock: Clock = system_clock,
) -> datetime | None:
    """Return the next occurrence after *from_* (default: now), or None.

    The reference is truncated to midnight before stepping; ``config.time``
    is then overlaid. None means the schedule never repeats, has passed its
    end date, or left the representable date range.

    Callers must guard against a custom pattern with no interval: it returns
    the (midnight-truncated) reference date itself.
    """
    if config.pattern == RecurrencePattern.NONE:
        return None

    if from_ is None:
        from_ = clock()
    start = from_.date() if isinstance(from_, datetime) else from_

    try:
        next_day = _advance(config, start)
    except OverflowError:
        next_day = None
    if next_day is None:
        logger.warning("No representable next date for %s from %s", config.pattern.value, start)
        return None

    at = _parse_hhmm(config.time) if config.time else time(0, 0)
    result = datetime.combine(next_day, at)

    if config.end_date is not None and next_day > config.end_date:
        logger.debug("Recurrence ended on %s; next would be %s", config.end_date, next_day)
        return None

    return result


def is_exhausted(config: RecurrenceConfig, generated: int) -> bool:
    """True once *generated* instances have reached the occurrence cap.

    The resolver keeps no per-task counter; callers that track how many
    instances they have created use this before asking for the next one.
    """
    return config.occurrences is not None and generated >= config.occurrences


# ---------------------------------------------------------------------------
# Descriptions & picker presets
# ---------------------------------------------------------------------------


def format_time_12h(value: str) -> str:
    """'15:00' -> '3:00 PM'."""
    hour_text, minute_text = value.split(":")
    hour = int(hour_text)
    meridiem = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute_text} {meridiem}"


def describe(config: RecurrenceConfig) -> str:
    """Human-readable summary, e.g. "Every 2 weeks at 3:00 PM"."""
    pattern = config.pattern

    if pattern == RecurrencePattern.NONE:
        return "Does not repeat"
    if pattern == RecurrencePattern.DAILY:
        desc = "Every day"
    elif pattern == RecurrencePattern.WEEKDAYS:
        desc = "Every weekday"
    elif pattern in (RecurrencePattern.WEEKLY, RecurrencePattern.BIWEEKLY):
        desc = "Every 2 weeks" if _effective_interval(config) == 2 else "Every week"
    elif pattern == RecurrencePattern.MONTHLY:
        desc = f"Every month on day {config.day_of_month or 1}"
    elif config.interval and config.interval > 1:
        desc = f"Every {config.interval} days"
    elif config.days_of_week:
        desc = "On " + ", ".join(DAY_ABBREVIATIONS[d] for d in sorted(config.days_of_week))
    else:
        desc = "Custom schedule"

    if config.time:
        desc += f" at {format_time_12h(config.time)}"
    return desc


def preset(
    pattern: RecurrencePattern | str,
    today: date,
    at: str | None = None,
) -> RecurrenceConfig:
    """Build the descriptor the recurrence picker stores for a quick pattern.

    Weekly patterns repeat on *today*'s weekday, monthly on its day-of-month.
    """
    pattern = RecurrencePattern(pattern)
    extra: dict = {}

    if pattern == RecurrencePattern.DAILY:
        extra = {"interval": 1}
    elif pattern == RecurrencePattern.WEEKDAYS:
        extra = {"days_of_week": frozenset({1, 2, 3, 4, 5})}
    elif pattern == RecurrencePattern.WEEKLY:
        extra = {"interval": 1, "days_of_week": frozenset({sunday_index(today)})}
    elif pattern == RecurrencePattern.BIWEEKLY:
        extra = {"interval": 2, "days_of_week": frozenset({sunday_index(today)})}
    elif pattern == RecurrencePattern.MONTHLY:
        extra = {"interval": 1, "day_of_month": today.day}

    return RecurrenceConfig(pattern=pattern, time=at, **extra)
