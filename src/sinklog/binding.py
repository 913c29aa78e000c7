"""Exactly-once binding of the sink into `logging`.

Lifecycle (per `FacadeBinding`):

    unregistered --init*--> registered --replace--> registered

`init`, `init_console`, and `init_err_console` may succeed once; afterwards only
the destination can change (through `replace`). There is no way back to the
unregistered state.

The module-level functions drive a process-wide binding on the root logger.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Generic, TypeVar

from .config import LoggerConfig, load_config
from .destinations import Console, Custom, Destination, ErrorConsole, destination_from_setting
from .holder import SinkHolder
from .models import TRACE, register_trace_level
from .renderer import RecordRenderer

_T = TypeVar("_T")


class AlreadyInitializedError(RuntimeError):
    """Raised when a binding is initialized a second time."""

    def __init__(self, logger_name: str) -> None:
        self.logger_name = logger_name
        super().__init__(f"sinklog is already initialized for logger {logger_name!r}; use replace() to retarget it")


class NotInitializedError(RuntimeError):
    """Raised when the destination is replaced before any init call."""

    def __init__(self, logger_name: str) -> None:
        self.logger_name = logger_name
        super().__init__(f"sinklog is not initialized for logger {logger_name!r}; call init() first")


class OnceCell(Generic[_T]):
    """A slot that can be filled exactly once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: _T | None = None

    def get(self) -> _T | None:
        return self._value

    def set(self, value: _T) -> bool:
        """Store `value` if the cell is empty. Returns False if it was already set."""
        with self._lock:
            if self._value is not None:
                return False
            self._value = value
            return True


def _color_stream(destination: Destination) -> object:
    if isinstance(destination, Console):
        return sys.stdout
    if isinstance(destination, ErrorConsole):
        return sys.stderr
    if isinstance(destination, Custom):
        return destination.writer
    return None


class FacadeBinding:
    """Registers one `RecordRenderer` on a logger and retargets it afterwards."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Bind to `logger` (the root logger when omitted). Nothing is registered yet."""
        self._logger = logger if logger is not None else logging.getLogger()
        self._cell: OnceCell[RecordRenderer] = OnceCell()

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def is_initialized(self) -> bool:
        return self._cell.get() is not None

    @property
    def renderer(self) -> RecordRenderer | None:
        """The registered renderer, or None before init."""
        return self._cell.get()

    def init(self, destination: Destination | None = None, *, config: LoggerConfig | None = None) -> RecordRenderer:
        """Register the sink with `destination` and open the threshold down to TRACE.

        Args:
            destination: Where lines go. Defaults to `config.destination` when a
                config is given, else stdout.
            config: Renderer settings; defaults to `LoggerConfig()`.

        Raises:
            AlreadyInitializedError: if any init* already succeeded on this binding.
        """
        if self.is_initialized:
            raise AlreadyInitializedError(self._logger.name)

        owned = destination is None and config is not None
        if destination is None:
            destination = destination_from_setting(config.destination) if config is not None else Console()
        cfg = config if config is not None else LoggerConfig()

        renderer = RecordRenderer(
            SinkHolder(destination),
            clock=cfg.clock,
            color=cfg.use_color(_color_stream(destination)),
            thread_label_width=cfg.thread_label_width,
            on_write_failure=cfg.write_failure_policy,
        )
        if not self._cell.set(renderer):
            # Lost a race with another init; release what this call opened.
            if owned and isinstance(destination, Custom):
                destination.close()
            raise AlreadyInitializedError(self._logger.name)

        register_trace_level()
        self._logger.addHandler(renderer)
        self._logger.setLevel(TRACE)
        return renderer

    def init_console(self) -> RecordRenderer:
        """Register the sink writing to stdout."""
        return self.init(Console())

    def init_err_console(self) -> RecordRenderer:
        """Register the sink writing to stderr."""
        return self.init(ErrorConsole())

    def init_from_config(self, config: LoggerConfig | None = None) -> RecordRenderer:
        """Register the sink using `config` (or `load_config()` from the environment)."""
        cfg = config if config is not None else load_config()
        return self.init(config=cfg)

    def replace(self, destination: Destination) -> Destination:
        """Retarget the registered sink and return the previous destination.

        Safe to call from any thread, including while other threads are logging.

        Raises:
            NotInitializedError: if no init* has succeeded yet.
        """
        renderer = self._cell.get()
        if renderer is None:
            raise NotInitializedError(self._logger.name)
        return renderer.holder.swap(destination)

    def flush(self) -> None:
        """Best-effort flush of the active destination (no-op before init)."""
        renderer = self._cell.get()
        if renderer is not None:
            renderer.flush()


_default = FacadeBinding()


def init(destination: Destination | None = None, *, config: LoggerConfig | None = None) -> RecordRenderer:
    """Register the process-wide sink on the root logger."""
    return _default.init(destination, config=config)


def init_console() -> RecordRenderer:
    return _default.init_console()


def init_err_console() -> RecordRenderer:
    return _default.init_err_console()


def init_from_config(config: LoggerConfig | None = None) -> RecordRenderer:
    return _default.init_from_config(config)


def replace(destination: Destination) -> Destination:
    """Retarget the process-wide sink."""
    return _default.replace(destination)


def flush() -> None:
    _default.flush()
