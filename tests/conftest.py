"""Shared test fixtures and configuration.

Sets up environment variables before any src imports so src.config loads
predictable values, and provides fixed clocks for date-dependent tests.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("PARSER_BASE_CONFIDENCE", "0.0")
os.environ.setdefault("SHORT_TITLE_LENGTH", "5")
os.environ.setdefault("DEFAULT_PRIORITY", "medium")

from datetime import datetime

import pytest

from src.core.clock import fixed_clock

# Wednesday morning
NOW = datetime(2026, 10, 14, 9, 30)


@pytest.fixture
def now():
    """The fixed reference time used across date-dependent tests."""
    return NOW


@pytest.fixture
def clock():
    """A clock frozen at NOW."""
    return fixed_clock(NOW)
