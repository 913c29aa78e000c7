"""Record rendering: one `logging.LogRecord` in, one text line out.

Line format (stable; log scrapers may rely on the bracketed tag):

    HH:MM:SS<color> <thread-label> [<TAG>]<reset> <message>\\n

With color disabled the escapes are simply omitted:

    HH:MM:SS <thread-label> [<TAG>] <message>\\n

Multi-line messages and tracebacks continue on lines indented by
`CONTINUATION_INDENT`, so every line that starts at column 0 starts a record.
"""

from __future__ import annotations

import logging
import os
import re
import sys
import threading
from enum import Enum

from .destinations import Destination
from .holder import SinkHolder
from .models import RESET, Clock, style_for, utc_now

# EX_SOFTWARE from sysexits.h.
FATAL_EXIT_CODE = 70

DEFAULT_THREAD_LABEL_WIDTH = 5

# Prefix for continuation lines (multi-line messages, tracebacks).
CONTINUATION_INDENT = "    "

# Names the interpreter assigns to threads nobody named.
_AUTO_THREAD_NAME = re.compile(r"^(?:Thread|Dummy)-\d+(?: \(.*\))?$")
_MAIN_THREAD_NAME = "MainThread"

_exc_formatter = logging.Formatter()


class WriteFailurePolicy(str, Enum):
    """What `RecordRenderer.emit` does when the destination fails to write."""

    ABORT = "abort"
    DROP = "drop"
    REPORT = "report"


def thread_label(name: str | None, ident: int | None, width: int | None = DEFAULT_THREAD_LABEL_WIDTH) -> str:
    """Derive the short label identifying a thread in rendered lines.

    - Explicitly named threads use their name, cut to `width` characters.
    - The interpreter's main thread is labelled `main`.
    - Unnamed threads fall back to `id <n>`, or `unknown` without an identity.
    """
    if name and name == _MAIN_THREAD_NAME:
        name = "main"
    if not name or _AUTO_THREAD_NAME.match(name):
        if ident is None:
            return "unknown"
        return f"id {ident}"
    if width is None:
        return name
    return name[:width]


def current_thread_label(width: int | None = DEFAULT_THREAD_LABEL_WIDTH) -> str:
    """Label for the calling thread."""
    thread = threading.current_thread()
    # `ident` is what `LogRecord.thread` carries, so both paths agree.
    return thread_label(thread.name, thread.ident, width)


def format_line(*, time: str, label: str, levelno: int, message: str, color: bool = True) -> str:
    """Compose one newline-terminated line."""
    style = style_for(levelno)
    if color:
        return f"{time}{style.color} {label} [{style.tag}]{RESET} {message}\n"
    return f"{time} {label} [{style.tag}] {message}\n"


def _terminate(message: str) -> None:
    """Write a fatal diagnostic and end the process immediately."""
    stream = sys.__stderr__
    if stream is not None:
        stream.write(f"sinklog: fatal: {message}\n")
        stream.flush()
    os._exit(FATAL_EXIT_CODE)


class RecordRenderer(logging.Handler):
    """`logging.Handler` that renders records and writes them through a `SinkHolder`.

    The handler does no filtering of its own (its level is NOTSET); the
    threshold on the bound logger decides which records arrive.
    """

    def __init__(
        self,
        holder: SinkHolder,
        *,
        clock: Clock = utc_now,
        color: bool = True,
        thread_label_width: int | None = DEFAULT_THREAD_LABEL_WIDTH,
        on_write_failure: WriteFailurePolicy = WriteFailurePolicy.ABORT,
    ) -> None:
        """Create a renderer writing through `holder`.

        Args:
            holder: Destination holder shared with whoever may swap the destination.
            clock: Wall-clock source; fixed per renderer (UTC unless configured).
            color: Emit ANSI color escapes around the level tag.
            thread_label_width: Truncation width for thread names (`None` keeps them whole).
            on_write_failure: Policy applied when the destination raises on write.
        """
        super().__init__(level=logging.NOTSET)
        self.holder = holder
        self._clock = clock
        self._color = color
        self._thread_label_width = thread_label_width
        self._on_write_failure = WriteFailurePolicy(on_write_failure)

    def enabled(self, record: logging.LogRecord) -> bool:  # noqa: ARG002 - facade filters, not us
        """Always True; the facade's global threshold does the filtering."""
        return True

    def render(self, record: logging.LogRecord) -> str:
        """Render `record` as a single line (plus any exception text)."""
        message = record.getMessage()
        if record.exc_info:
            if not record.exc_text:
                record.exc_text = _exc_formatter.formatException(record.exc_info)
        if record.exc_text:
            message = f"{message}\n{record.exc_text}"
        message = message.replace("\n", "\n" + CONTINUATION_INDENT)

        return format_line(
            time=self._clock().strftime("%H:%M:%S"),
            label=thread_label(record.threadName, record.thread, self._thread_label_width),
            levelno=record.levelno,
            message=message,
            color=self._color,
        )

    def emit(self, record: logging.LogRecord) -> None:
        """Render and write one record."""
        try:
            data = self.render(record).encode("utf-8")
        except Exception:  # noqa: BLE001 - bad format args are the caller's bug, reported like stdlib handlers do
            self.handleError(record)
            return

        def _write(destination: Destination) -> None:
            destination.write(data)

        try:
            self.holder.with_write(_write, resync=b"\n")
        except Exception as exc:  # noqa: BLE001 - policy decides
            if self._on_write_failure is WriteFailurePolicy.DROP:
                return
            if self._on_write_failure is WriteFailurePolicy.REPORT:
                self.handleError(record)
                return
            _terminate(f"cannot write to the log destination: {exc!r}")

    def log(self, record: logging.LogRecord) -> None:
        """Facade-style alias for `emit`."""
        self.emit(record)

    def flush(self) -> None:
        """Best-effort flush of the active destination."""
        try:
            self.holder.flush()
        except Exception:  # noqa: BLE001 - flushing is best-effort
            pass
