"""Level and style models shared by the renderer and the binding.

The five levels mirror the facade's severities. Python's `logging` has no
TRACE and has an extra CRITICAL, so:
- TRACE is registered as level 5 (below DEBUG).
- CRITICAL folds into ERROR when a record is rendered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import IntEnum
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict

TRACE = 5

RESET = "\x1b[0m"

Clock: TypeAlias = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(tz=timezone.utc)


def local_now() -> datetime:
    """Return the current local time as a timezone-aware datetime."""
    return datetime.now().astimezone()


def register_trace_level() -> None:
    """Teach `logging` the TRACE level name (safe to call repeatedly)."""
    if logging.getLevelName(TRACE) != "TRACE":
        logging.addLevelName(TRACE, "TRACE")


class Level(IntEnum):
    """Record severity, ordered from most to least verbose."""

    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def from_levelno(cls, levelno: int) -> Level:
        """Fold an arbitrary `logging` level number onto the five levels."""
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.TRACE


class LevelStyle(BaseModel):
    """ANSI color escape plus the fixed three-letter tag for a level."""

    model_config = ConfigDict(frozen=True)

    color: str
    tag: str


LEVEL_STYLES: dict[Level, LevelStyle] = {
    Level.INFO: LevelStyle(color="\x1b[97m", tag="INF"),
    Level.DEBUG: LevelStyle(color="\x1b[36m", tag="DBG"),
    Level.ERROR: LevelStyle(color="\x1b[31m", tag="ERR"),
    Level.WARN: LevelStyle(color="\x1b[33m", tag="WRN"),
    Level.TRACE: LevelStyle(color="\x1b[97m", tag="TRC"),
}


def style_for(levelno: int) -> LevelStyle:
    """Return the style used to render a record of the given level number."""
    return LEVEL_STYLES[Level.from_levelno(levelno)]
