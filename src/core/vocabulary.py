"""
Do.This Capture — Parser vocabulary.

Fixed keyword tables shared by the parser. Dict order is significant:
the parser walks each table top to bottom and the first phrase found wins.
"""

from __future__ import annotations

from typing import Literal

Priority = Literal["low", "medium", "high"]
InlineRecurrence = Literal["daily", "weekly", "monthly"]

# Sunday-first, matching the 0..6 numbering used by recurrence descriptors
DAY_NAMES = (
    "sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday",
)
DAY_ABBREVIATIONS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

MONTH_PREFIXES = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)

RECURRENCE_PHRASES: dict[str, InlineRecurrence] = {
    "every day": "daily",
    "daily": "daily",
    "everyday": "daily",
    "each day": "daily",
    "every week": "weekly",
    "weekly": "weekly",
    "each week": "weekly",
    "every month": "monthly",
    "monthly": "monthly",
    "each month": "monthly",
    # "every monday" has no day-specific form at this layer: plain weekly
    **{f"every {day}": "weekly" for day in DAY_NAMES},
}

PRIORITY_KEYWORDS: dict[str, Priority] = {
    "urgent": "high",
    "important": "high",
    "critical": "high",
    "high priority": "high",
    "asap": "high",
    "low priority": "low",
    "whenever": "low",
    "eventually": "low",
    "someday": "low",
}

# keyword -> (days, months) offset from today
DATE_KEYWORDS: dict[str, tuple[int, int]] = {
    "today": (0, 0),
    "tomorrow": (1, 0),
    "yesterday": (-1, 0),
    "next week": (7, 0),
    "next month": (0, 1),
}

FILLER_WORDS = ("to", "and", "the", "a")

CONFIDENCE_WEIGHTS: dict[str, float] = {
    "project": 0.1,
    "recurrence": 0.1,
    "priority": 0.1,
    "duration": 0.1,
    "time": 0.15,
    "relative_date": 0.15,
    "weekday": 0.1,
    "month_date": 0.1,
    "numeric_date": 0.1,
}

SUGGEST_DATE = 'Add "tomorrow" or "next monday" for scheduling'
SUGGEST_TIME = 'Add "at 3pm" to set a specific time'
SUGGEST_DETAIL = "Consider adding more details to your task"

PLACEHOLDER_EXAMPLES = (
    "Call mom tomorrow at 3pm",
    "Finish report by Friday",
    "Team meeting every Monday at 10am",
    "Buy groceries #shopping",
    "Workout for 30 minutes daily",
    "Submit proposal next week urgent",
)
