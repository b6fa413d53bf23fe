"""
Do.This Capture — Recurring Task Materialization.

Bridges parser output and the task store: builds task records from a
ParseResult, and when a recurring task is completed works out the next
instance. The next due date is seeded from the completed task's own due
date, not from today, so the cadence holds even when a task is done late.
Completing several overdue instances in one sitting therefore only moves
each one a single step forward.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING

from src.config import settings
from src.core.clock import Clock, system_clock
from src.core.recurrence import RecurrenceConfig, next_occurrence
from src.data.models import TASK_RECURRENCES, Task

if TYPE_CHECKING:
    from src.core.parser import ParseResult

logger = logging.getLogger(__name__)


def task_from_parse(result: ParseResult, task_id: str | None = None) -> Task:
    """Copy parsed fields into a new task record.

    Tasks without a priority keyword get the configured default priority.
    """
    parsed = result.task
    return Task(
        id=task_id or uuid.uuid4().hex,
        title=parsed.title,
        due_date=parsed.date,
        due_time=parsed.time,
        priority=parsed.priority or settings.DEFAULT_PRIORITY,
        category=parsed.project,
        tags=[parsed.project] if parsed.project else [],
        recurrence=parsed.recurrence,
        duration_minutes=parsed.duration,
    )


def next_due_date(
    recurrence: str | None,
    due_date: date | None,
    clock: Clock = system_clock,
) -> date | None:
    """Next due date for a task-level recurrence, or None for one-off tasks.

    Uses the same day arithmetic as the recurrence picker's schedules,
    stepping once from *due_date* (today when the task had none).
    """
    if recurrence in (None, "none"):
        return None
    if recurrence not in TASK_RECURRENCES:
        raise ValueError(f"Unknown task recurrence: {recurrence!r}")

    base = due_date or clock().date()
    nxt = next_occurrence(RecurrenceConfig(pattern=recurrence), base)
    return nxt.date() if nxt else None


def toggle_completion(task: Task, clock: Clock = system_clock) -> tuple[Task, Task | None]:
    """Flip a task's completion state.

    Returns the updated task and, when an open recurring task was just
    completed, the freshly scheduled next instance. Reopening a completed
    task never creates an instance.
    """
    if task.completed:
        logger.info("Reopening task '%s'", task.title)
        return replace(task, completed=False, completed_at=None), None

    done = replace(task, completed=True, completed_at=clock())
    if not task.is_recurring:
        return done, None

    try:
        due = next_due_date(task.recurrence, task.due_date, clock)
    except ValueError as exc:
        # The completion itself stands even when no next instance can be made
        logger.warning("Cannot schedule next instance of '%s': %s", task.title, exc)
        return done, None
    if due is None:
        logger.warning("No next date for recurring task '%s'", task.title)
        return done, None

    logger.info("Creating next recurring instance for '%s' on %s", task.title, due)
    following = replace(
        task,
        id=uuid.uuid4().hex,
        completed=False,
        completed_at=None,
        due_date=due,
        tags=list(task.tags),
    )
    return done, following
