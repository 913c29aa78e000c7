"""Output destinations (where rendered lines go).

A destination is one of a closed set of variants:
- `Console`: the process's current stdout.
- `ErrorConsole`: the process's current stderr.
- `Custom`: any caller-supplied object that can write bytes and flush.

Console variants look up `sys.stdout` / `sys.stderr` on every call rather than
capturing the stream at construction, so redirection (and test capture) is
honored.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TextIO, TypeAlias


class Writer(Protocol):
    """Minimal byte-sink capability required by `Custom`."""

    def write(self, data: bytes) -> object:
        """Write raw bytes."""

    def flush(self) -> None:
        """Push any buffered bytes to the underlying medium."""


def _write_text(stream: TextIO, data: bytes) -> None:
    stream.write(data.decode("utf-8", errors="replace"))


@dataclass(frozen=True)
class Console:
    """Standard output."""

    def write(self, data: bytes) -> None:
        _write_text(sys.stdout, data)

    def flush(self) -> None:
        sys.stdout.flush()


@dataclass(frozen=True)
class ErrorConsole:
    """Standard error."""

    def write(self, data: bytes) -> None:
        _write_text(sys.stderr, data)

    def flush(self) -> None:
        sys.stderr.flush()


@dataclass(frozen=True)
class Custom:
    """A caller-owned writer (file, socket wrapper, in-memory buffer...)."""

    writer: Writer

    def write(self, data: bytes) -> None:
        self.writer.write(data)

    def flush(self) -> None:
        self.writer.flush()

    def close(self) -> None:
        """Close the owned writer if it supports closing."""
        close = getattr(self.writer, "close", None)
        if callable(close):
            close()


Destination: TypeAlias = Console | ErrorConsole | Custom


def open_file(path: str | Path) -> Custom:
    """Open `path` for binary append and wrap it as a destination."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return Custom(p.open("ab"))


def destination_from_setting(value: str) -> Destination:
    """Resolve a configuration value (`stdout`, `stderr`, or a file path)."""
    normalized = value.strip()
    if not normalized:
        raise ValueError("destination must be 'stdout', 'stderr', or a file path. Got an empty value.")
    if normalized.lower() == "stdout":
        return Console()
    if normalized.lower() == "stderr":
        return ErrorConsole()
    return open_file(normalized)
