"""
Do.This Capture — Centralized configuration.

Loads all settings from .env and validates them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

_PRIORITIES = ("low", "medium", "high")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Parser — confidence starts here before any field is recognized
    PARSER_BASE_CONFIDENCE: float = 0.0

    # Titles shorter than this get a "add more detail" suggestion
    SHORT_TITLE_LENGTH: int = 5

    # Priority applied by callers when the parser found no keyword
    DEFAULT_PRIORITY: str = "medium"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: str) -> str:
        level = str(v).strip().upper() or "INFO"
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("PARSER_BASE_CONFIDENCE", mode="before")
    @classmethod
    def parse_confidence(cls, v: str | float) -> float:
        value = float(v) if str(v).strip() else 0.0
        if not 0.0 <= value <= 1.0:
            raise ValueError("PARSER_BASE_CONFIDENCE must be between 0 and 1")
        return value

    @field_validator("SHORT_TITLE_LENGTH", mode="before")
    @classmethod
    def parse_length(cls, v: str | int) -> int:
        return int(v)

    @field_validator("DEFAULT_PRIORITY", mode="before")
    @classmethod
    def parse_priority(cls, v: str) -> str:
        priority = str(v).strip().lower() or "medium"
        if priority not in _PRIORITIES:
            raise ValueError(f"DEFAULT_PRIORITY must be one of {', '.join(_PRIORITIES)}")
        return priority


def _load_settings() -> Settings:
    """Load settings from environment, exiting on invalid values."""
    try:
        return Settings(
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
            PARSER_BASE_CONFIDENCE=os.getenv("PARSER_BASE_CONFIDENCE", "0.0"),
            SHORT_TITLE_LENGTH=os.getenv("SHORT_TITLE_LENGTH", "5"),
            DEFAULT_PRIORITY=os.getenv("DEFAULT_PRIORITY", "medium"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid configuration in environment/.env:\n{exc}", file=sys.stderr)
        sys.exit(1)


# Singleton — imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
