"""Calendar arithmetic with rollover — pure business logic.

Out-of-range days and months roll into neighbouring months instead of
raising ("February 31st" is March 2nd or 3rd). Both the parser and the
recurrence resolver depend on that behaviour.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

logger = logging.getLogger(__name__)


def rolled_date(year: int, month: int, day: int) -> date | None:
    """Build a date, rolling overflowing months/days into adjacent months.

    Args:
        year: Calendar year.
        month: 1-based month; 0 or 13 roll into the neighbouring year.
        day: Day of month; 0 is the last day of the previous month,
             values past the month's end continue into the next month.

    Returns:
        The resolved date, or None when it falls outside the range
        ``datetime.date`` can represent.
    """
    years, month_index = divmod(year * 12 + (month - 1), 12)
    try:
        return date(years, month_index + 1, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError) as exc:
        logger.warning("Date out of range for %d-%d-%d: %s", year, month, day, exc)
        return None


def add_months(d: date, months: int, day: int | None = None) -> date | None:
    """Advance *d* by whole calendar months.

    The day-of-month is kept (or forced to *day*); when the target month is
    too short the result rolls forward, e.g. Jan 31 + 1 month = Mar 2 (leap
    year) or Mar 3.
    """
    return rolled_date(d.year, d.month + months, d.day if day is None else day)


def sunday_index(d: date) -> int:
    """Weekday number with Sunday = 0 ... Saturday = 6."""
    return (d.weekday() + 1) % 7


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5
