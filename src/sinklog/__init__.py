"""Thread-safe, swappable log sink for the standard `logging` facade.

This package provides:
- A single active destination (stdout, stderr, or any byte writer) held behind
  a mutex that can be swapped while other threads are logging.
- A fixed-format, color-coded line renderer (`HH:MM:SS <thread> [TAG] message`).
- An exactly-once registration of the sink on a logger (the root logger by default).

Typical use:

    import logging
    import sinklog

    sinklog.init_console()
    logging.getLogger(__name__).info("ready")
    sinklog.replace(sinklog.open_file("app.log"))
"""

from .binding import (
    AlreadyInitializedError,
    FacadeBinding,
    NotInitializedError,
    flush,
    init,
    init_console,
    init_err_console,
    init_from_config,
    replace,
)
from .config import LoggerConfig, load_config
from .destinations import Console, Custom, Destination, ErrorConsole, Writer, open_file
from .holder import SinkHolder
from .models import TRACE, Level
from .renderer import RecordRenderer, WriteFailurePolicy

__all__ = [
    "TRACE",
    "AlreadyInitializedError",
    "Console",
    "Custom",
    "Destination",
    "ErrorConsole",
    "FacadeBinding",
    "Level",
    "LoggerConfig",
    "NotInitializedError",
    "RecordRenderer",
    "SinkHolder",
    "WriteFailurePolicy",
    "Writer",
    "flush",
    "init",
    "init_console",
    "init_err_console",
    "init_from_config",
    "load_config",
    "open_file",
    "replace",
]
