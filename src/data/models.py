"""
Do.This Capture — Data Models.

The task record the rest of the app persists. Storage itself lives outside
this package; these shapes are what the parser output is copied into and
what recurring-task materialization reads back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

# Coarse recurrence vocabulary stored on a task record
TASK_RECURRENCES = ("none", "daily", "weekdays", "weekly", "biweekly", "monthly")


@dataclass(frozen=True)
class Task:
    """A task as stored by the task store.

    Recurring tasks are not expanded up front: completing one creates the
    next instance (see src.core.task_completion).
    """

    id: str
    title: str
    completed: bool = False
    due_date: date | None = None
    due_time: str | None = None           # HH:MM
    priority: str = "medium"              # low | medium | high
    category: str | None = None           # from a #project tag
    tags: list[str] = field(default_factory=list)
    recurrence: str | None = None         # one of TASK_RECURRENCES, None = one-off
    duration_minutes: int | None = None
    completed_at: datetime | None = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence not in (None, "none")
