"""Current-time providers.

Everything that resolves relative dates ("tomorrow", "next friday") or
defaults a reference date asks a clock instead of reading the system time
directly, so callers and tests can pin "now".
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Local wall-clock time. No timezone handling by design of the app."""
    return datetime.now()


def fixed_clock(moment: datetime | date) -> Clock:
    """Return a clock frozen at *moment* (a date means midnight of that day)."""
    if not isinstance(moment, datetime):
        moment = datetime.combine(moment, time(0, 0))

    def _now() -> datetime:
        return moment

    return _now
