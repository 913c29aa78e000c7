"""Thread-safe holder for the single active destination."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TypeVar

from .destinations import Console, Destination

_R = TypeVar("_R")


class SinkHolder:
    """Owns one destination behind a mutex and allows swapping it in place.

    Members:
    - Active destination: `_destination` (only touched while `_lock` is held)
    - Lock: `_lock` (plain mutex; writers and swaps serialize on it)
    - Poison flag: `_poisoned` (set when an operation raised while holding the lock)

    Poisoning: Python locks are always released by `with`, but the destination
    may be left mid-write when an operation raises. The holder records that and
    the next acquirer clears it and carries on. The write that raised is lost;
    the holder stays usable.
    """

    def __init__(self, destination: Destination | None = None) -> None:
        """Wrap `destination` (stdout when omitted). No I/O is performed."""
        self._destination: Destination = destination if destination is not None else Console()
        self._lock = threading.Lock()
        self._poisoned = False
        self._poison_recoveries = 0

    @property
    def is_poisoned(self) -> bool:
        """True when the last operation under the lock raised."""
        return self._poisoned

    @property
    def poison_recoveries(self) -> int:
        """How many times a poisoned state has been cleared."""
        return self._poison_recoveries

    def clear_poison(self) -> None:
        """Explicitly clear the poison flag (the next acquirer does this anyway)."""
        with self._lock:
            self._recover()

    def _recover(self) -> bool:
        """Clear poison; True if there was any. Caller holds the lock."""
        if not self._poisoned:
            return False
        self._poisoned = False
        self._poison_recoveries += 1
        return True

    def with_write(self, op: Callable[[Destination], _R], *, resync: bytes = b"") -> _R:
        """Run `op` against the live destination with exclusive access.

        When the previous operation was poisoned, `resync` is written first so
        whatever fragment it left behind is terminated before `op` runs.

        Exceptions raised by `op` propagate to the caller after the holder has
        been marked poisoned.
        """
        with self._lock:
            try:
                if self._recover() and resync:
                    self._destination.write(resync)
                return op(self._destination)
            except BaseException:
                self._poisoned = True
                raise

    def swap(self, destination: Destination) -> Destination:
        """Atomically replace the active destination and return the previous one.

        The previous destination is neither flushed nor closed; that is left to
        the caller. The new destination starts clean, so any poison is cleared.
        """
        with self._lock:
            self._recover()
            previous = self._destination
            self._destination = destination
            return previous

    def flush(self) -> None:
        """Flush the active destination under the lock.

        A failed flush leaves no partial bytes behind, so it does not poison.
        """
        with self._lock:
            self._destination.flush()
