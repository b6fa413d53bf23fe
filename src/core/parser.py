"""
Do.This Capture — Natural Language Task Parser.

Brain of the Quick Capture box: turns one line of free text such as
"call mom tomorrow at 3pm #family urgent" into structured task fields.

Rule-based and deterministic. The line is run through an ordered pipeline
of stages; each stage looks for one kind of field in the *remaining* title,
records the value and cuts the matched words out, so later stages never
see tokens an earlier stage already consumed. Whatever is left is the title.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict

from src.config import settings
from src.core.clock import Clock, system_clock
from src.core.date_math import add_months, rolled_date, sunday_index
from src.core.vocabulary import (
    CONFIDENCE_WEIGHTS,
    DATE_KEYWORDS,
    DAY_NAMES,
    FILLER_WORDS,
    MONTH_PREFIXES,
    PLACEHOLDER_EXAMPLES,
    PRIORITY_KEYWORDS,
    RECURRENCE_PHRASES,
    SUGGEST_DATE,
    SUGGEST_DETAIL,
    SUGGEST_TIME,
    InlineRecurrence,
    Priority,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Output contract — consumed by task_completion and the capture UI
# ---------------------------------------------------------------------------


class ParsedTask(BaseModel):
    """Structured task fields extracted from one line of text.

    JSON example:
    {
        "title": "Call mom",
        "date": "2026-10-17",
        "time": "15:00",
        "priority": "high",
        "project": "family",
        "duration": null,
        "recurrence": null
    }
    """
    model_config = ConfigDict(frozen=True)

    title: str
    date: dt.date | None = None
    time: str | None = None                    # HH:MM in 24h format
    priority: Priority | None = None           # None → caller applies default
    project: str | None = None                 # tag text without the "#"
    duration: int | None = None                # minutes
    recurrence: InlineRecurrence | None = None


class ParseResult(BaseModel):
    """Parser output: the task plus how much of it was recognized."""
    model_config = ConfigDict(frozen=True)

    success: bool
    task: ParsedTask
    confidence: float
    suggestions: list[str] = []


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_PROJECT_PATTERN = re.compile(r"#([A-Za-z0-9_]+)")

_DURATION_PATTERN = re.compile(
    r"(?:\bfor\s+)?\b(\d+)\s*(minutes|minute|mins|min|hours|hour|hrs|hr|h|m)\b",
    re.IGNORECASE,
)

_TIME_PATTERNS = (
    re.compile(r"\bat\s+(\d{1,2})(?!/)(?::(\d{2}))?\s*(am|pm)?\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", re.IGNORECASE),
    re.compile(r"\bby\s+(\d{1,2})(?!/)(?::(\d{2}))?\s*(am|pm)?\b", re.IGNORECASE),
)

_MONTH_DATE_PATTERN = re.compile(
    r"(?:\bon\s+)?\b(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?"
    r"|july?|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?"
    r"|dec(?:ember)?)\s+(\d{1,2})(?:st|nd|rd|th)?\b",
    re.IGNORECASE,
)

_NUMERIC_DATE_PATTERN = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b")

_LEADING_FILLER = re.compile(rf"^(?:{'|'.join(FILLER_WORDS)})\s+", re.IGNORECASE)
_TRAILING_FILLER = re.compile(rf"\s+(?:{'|'.join(FILLER_WORDS)})$", re.IGNORECASE)


def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    """Case-insensitive whole-word pattern for a keyword phrase."""
    return re.compile(rf"\b{re.escape(phrase)}\b", re.IGNORECASE)


_RECURRENCE_TABLE = [(_phrase_pattern(p), v) for p, v in RECURRENCE_PHRASES.items()]
_PRIORITY_TABLE = [(_phrase_pattern(p), v) for p, v in PRIORITY_KEYWORDS.items()]
_DATE_KEYWORD_TABLE = [(_phrase_pattern(p), v) for p, v in DATE_KEYWORDS.items()]

# Per day, in priority order: next <day>, this <day>, on <day>, <day>
_WEEKDAY_TABLE = [
    (
        index,
        [
            (re.compile(rf"\b{prefix}\s+{day}\b", re.IGNORECASE), prefix == "next")
            for prefix in ("next", "this", "on")
        ] + [(re.compile(rf"\b{day}\b", re.IGNORECASE), False)],
    )
    for index, day in enumerate(DAY_NAMES)
]


# ---------------------------------------------------------------------------
# Pipeline state
# ---------------------------------------------------------------------------


@dataclass
class _Extraction:
    """Mutable working state threaded through the stages of one parse."""

    title: str
    today: dt.date
    fields: dict[str, Any] = field(default_factory=dict)

    def cut(self, match: re.Match[str]) -> None:
        """Remove one matched span from the working title."""
        self.title = f"{self.title[:match.start()]} {self.title[match.end():]}"

    def cut_all(self, pattern: re.Pattern[str]) -> None:
        """Remove every occurrence of *pattern* from the working title."""
        self.title = pattern.sub(" ", self.title)


# ---------------------------------------------------------------------------
# Stages — each returns True when it recognized its field
# ---------------------------------------------------------------------------


def _extract_project(state: _Extraction) -> bool:
    match = _PROJECT_PATTERN.search(state.title)
    if not match:
        return False
    state.fields["project"] = match.group(1)
    state.cut_all(_PROJECT_PATTERN)
    return True


def _extract_keyword(
    state: _Extraction, table: list[tuple[re.Pattern[str], Any]], name: str,
) -> bool:
    """First phrase of *table* present in the title wins; all copies are cut."""
    for pattern, value in table:
        if pattern.search(state.title):
            state.fields[name] = value
            state.cut_all(pattern)
            return True
    return False


def _extract_recurrence(state: _Extraction) -> bool:
    return _extract_keyword(state, _RECURRENCE_TABLE, "recurrence")


def _extract_priority(state: _Extraction) -> bool:
    return _extract_keyword(state, _PRIORITY_TABLE, "priority")


def _extract_duration(state: _Extraction) -> bool:
    match = _DURATION_PATTERN.search(state.title)
    if not match:
        return False
    value = int(match.group(1))
    unit = match.group(2).lower()
    state.fields["duration"] = value * 60 if unit.startswith("h") else value
    state.cut(match)
    return True


def _normalize_time(hour_text: str, minute_text: str | None, meridiem: str | None) -> str | None:
    """Convert matched time parts to "HH:MM", or None if out of range.

    Without am/pm the digits are taken literally as a 24h hour, so "at 3"
    means 03:00.
    """
    hour = int(hour_text)
    minute = int(minute_text) if minute_text else 0
    meridiem = meridiem.lower() if meridiem else None

    if meridiem == "pm" and hour < 12:
        hour += 12
    if meridiem == "am" and hour == 12:
        hour = 0

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return f"{hour:02d}:{minute:02d}"


def _extract_time(state: _Extraction) -> bool:
    for pattern in _TIME_PATTERNS:
        for match in pattern.finditer(state.title):
            value = _normalize_time(*match.groups())
            if value is None:
                logger.debug("Ignoring out-of-range time '%s'", match.group(0))
                continue
            state.fields["time"] = value
            state.cut(match)
            return True
    return False


def _extract_relative_date(state: _Extraction) -> bool:
    if "date" in state.fields:
        return False
    for pattern, (days, months) in _DATE_KEYWORD_TABLE:
        if not pattern.search(state.title):
            continue
        target = state.today + dt.timedelta(days=days)
        if months:
            target = add_months(target, months)
        if target is None:
            return False
        state.fields["date"] = target
        state.cut_all(pattern)
        return True
    return False


def _extract_weekday(state: _Extraction) -> bool:
    if "date" in state.fields:
        return False
    today_index = sunday_index(state.today)
    for day_index, phrasings in _WEEKDAY_TABLE:
        for pattern, is_next in phrasings:
            match = pattern.search(state.title)
            if not match:
                continue
            delta = day_index - today_index
            if delta <= 0:
                delta += 7
            if is_next:
                delta += 7
            state.fields["date"] = state.today + dt.timedelta(days=delta)
            state.cut(match)
            return True
    return False


def _extract_month_date(state: _Extraction) -> bool:
    if "date" in state.fields:
        return False
    match = _MONTH_DATE_PATTERN.search(state.title)
    if not match:
        return False
    month = MONTH_PREFIXES.index(match.group(1)[:3].lower()) + 1
    day = int(match.group(2))

    target = rolled_date(state.today.year, month, day)
    if target is not None and target < state.today:
        target = rolled_date(state.today.year + 1, month, day)
    if target is None:
        return False
    state.fields["date"] = target
    state.cut(match)
    return True


def _extract_numeric_date(state: _Extraction) -> bool:
    if "date" in state.fields:
        return False
    match = _NUMERIC_DATE_PATTERN.search(state.title)
    if not match:
        return False
    month, day = int(match.group(1)), int(match.group(2))
    year = int(match.group(3)) if match.group(3) else state.today.year
    if year < 100:
        year += 2000

    target = rolled_date(year, month, day)
    if target is None:
        return False
    state.fields["date"] = target
    state.cut(match)
    return True


# Order matters: later patterns assume earlier tokens are already gone.
_PIPELINE: list[tuple[str, Callable[[_Extraction], bool]]] = [
    ("project", _extract_project),
    ("recurrence", _extract_recurrence),
    ("priority", _extract_priority),
    ("duration", _extract_duration),
    ("time", _extract_time),
    ("relative_date", _extract_relative_date),
    ("weekday", _extract_weekday),
    ("month_date", _extract_month_date),
    ("numeric_date", _extract_numeric_date),
]


# ---------------------------------------------------------------------------
# Title cleanup & suggestions
# ---------------------------------------------------------------------------


def clean_title(raw: str) -> str:
    """Collapse whitespace, drop one leading/trailing filler word, capitalize."""
    title = " ".join(raw.split())
    title = _LEADING_FILLER.sub("", title, count=1)
    title = _TRAILING_FILLER.sub("", title, count=1).strip()
    if title:
        title = title[0].upper() + title[1:]
    return title


def _build_suggestions(title: str, date: dt.date | None, time: str | None) -> list[str]:
    suggestions: list[str] = []
    if date is None:
        suggestions.append(SUGGEST_DATE)
    if time is None:
        suggestions.append(SUGGEST_TIME)
    if len(title) < settings.SHORT_TITLE_LENGTH:
        suggestions.append(SUGGEST_DETAIL)
    return suggestions


# ---------------------------------------------------------------------------
# Parser function
# ---------------------------------------------------------------------------


def parse(text: str, clock: Clock = system_clock) -> ParseResult:
    """Parse one line of text into structured task fields.

    Never raises: text with nothing left after extraction comes back with
    ``success=False`` and an empty title.
    """
    state = _Extraction(title=text.strip(), today=clock().date())
    confidence = settings.PARSER_BASE_CONFIDENCE

    for name, stage in _PIPELINE:
        if stage(state):
            confidence += CONFIDENCE_WEIGHTS[name]
            logger.debug("Stage '%s' matched, remaining title: '%s'", name, state.title)

    title = clean_title(state.title)
    task = ParsedTask(title=title, **state.fields)
    confidence = round(min(max(confidence, 0.0), 1.0), 2)

    logger.info(
        "Parsed task '%s' (date=%s, time=%s, confidence=%.2f)",
        task.title, task.date, task.time, confidence,
    )
    return ParseResult(
        success=bool(title),
        task=task,
        confidence=confidence,
        suggestions=_build_suggestions(title, task.date, task.time),
    )


def placeholder_examples() -> list[str]:
    """Sample inputs the capture box cycles through as placeholder text."""
    return list(PLACEHOLDER_EXAMPLES)
