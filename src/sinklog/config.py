"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting `SINKLOG_*` environment variables into a typed Pydantic model.
- Validating values and providing actionable error messages.
"""

from __future__ import annotations

import os
from typing import Literal

import dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Clock, local_now, utc_now
from .renderer import DEFAULT_THREAD_LABEL_WIDTH, WriteFailurePolicy

ColorMode = Literal["always", "never", "auto"]
TimezoneMode = Literal["utc", "local"]
WriteFailureMode = Literal["abort", "drop", "report"]


def _get_env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    """Read an enumerated env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    normalized = raw.strip().lower()
    if normalized not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)}. Got: {raw!r}")
    return normalized


def _get_env_width(name: str, default: int | None) -> int | None:
    """Read a truncation width; `0` means no truncation."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an int. Got: {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{name} must be >= 0. Got: {raw!r}")
    return value or None


class LoggerConfig(BaseModel):
    """Settings for the process-wide log sink."""

    model_config = ConfigDict(frozen=True)

    destination: str = Field(default="stdout", description="stdout, stderr, or a file path")
    color: ColorMode = Field(default="always", description="ANSI color escapes around the level tag")
    thread_label_width: int | None = Field(
        default=DEFAULT_THREAD_LABEL_WIDTH, description="Thread name truncation (None disables)"
    )
    timezone: TimezoneMode = Field(default="utc", description="Clock used for HH:MM:SS timestamps")
    on_write_failure: WriteFailureMode = Field(default="abort", description="Destination write failure policy")

    @field_validator("destination")
    def validate_destination(cls, v: str) -> str:
        """Reject empty destinations."""
        if not v.strip():
            raise ValueError("SINKLOG_DESTINATION must be 'stdout', 'stderr', or a file path.")
        return v.strip()

    @field_validator("thread_label_width")
    def validate_thread_label_width(cls, v: int | None) -> int | None:
        """Width must be positive when set."""
        if v is not None and v <= 0:
            raise ValueError("thread_label_width must be a positive int or None.")
        return v

    @property
    def clock(self) -> Clock:
        """Clock matching the configured timezone."""
        return utc_now if self.timezone == "utc" else local_now

    @property
    def write_failure_policy(self) -> WriteFailurePolicy:
        return WriteFailurePolicy(self.on_write_failure)

    def use_color(self, stream: object) -> bool:
        """Resolve the color mode; `auto` enables color only on a TTY."""
        if self.color == "always":
            return True
        if self.color == "never":
            return False
        isatty = getattr(stream, "isatty", None)
        try:
            return bool(isatty()) if callable(isatty) else False
        except ValueError:
            # Closed stream.
            return False


def load_config() -> LoggerConfig:
    """Load sink configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - Raises `ValueError` with actionable messages for invalid values.
    """
    dotenv.load_dotenv()

    return LoggerConfig(
        destination=os.getenv("SINKLOG_DESTINATION", "").strip() or "stdout",
        color=_get_env_choice("SINKLOG_COLOR", "always", ("always", "never", "auto")),
        thread_label_width=_get_env_width("SINKLOG_THREAD_LABEL_WIDTH", DEFAULT_THREAD_LABEL_WIDTH),
        timezone=_get_env_choice("SINKLOG_TIMEZONE", "utc", ("utc", "local")),
        on_write_failure=_get_env_choice("SINKLOG_ON_WRITE_FAILURE", "abort", ("abort", "drop", "report")),
    )
