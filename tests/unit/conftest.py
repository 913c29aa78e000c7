from __future__ import annotations

import io
import logging
import threading
import time
from collections.abc import Iterator

import pytest


class ChunkedWriter:
    """Byte sink that writes one byte at a time and yields between bytes.

    Makes interleaving visible if two writers ever reach it concurrently.
    """

    def __init__(self) -> None:
        self._buf = io.BytesIO()
        self._guard = threading.Lock()
        self.flushes = 0

    def write(self, data: bytes) -> int:
        for i in range(len(data)):
            with self._guard:
                self._buf.write(data[i : i + 1])
            time.sleep(0)
        return len(data)

    def flush(self) -> None:
        self.flushes += 1

    def getvalue(self) -> bytes:
        with self._guard:
            return self._buf.getvalue()


class FailingWriter:
    def __init__(self, exc: BaseException | None = None) -> None:
        self._exc = exc or OSError(28, "No space left on device")

    def write(self, data: bytes) -> int:  # noqa: ARG002
        raise self._exc

    def flush(self) -> None:
        raise self._exc


@pytest.fixture
def isolated_logger(request: pytest.FixtureRequest) -> Iterator[logging.Logger]:
    """A non-propagating logger private to the test; handlers removed afterwards."""
    logger = logging.getLogger(f"sinklog.tests.{request.node.name}")
    logger.propagate = False
    yield logger
    from sinklog.renderer import RecordRenderer

    # pytest attaches its own capture handlers to non-propagating loggers; leave those alone.
    for handler in list(logger.handlers):
        if isinstance(handler, RecordRenderer):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def make_chunked_writer() -> type[ChunkedWriter]:
    return ChunkedWriter


@pytest.fixture
def make_failing_writer() -> type[FailingWriter]:
    return FailingWriter


class HalfLineWriter:
    """Writes the first half of its first payload, then fails; healthy afterwards."""

    def __init__(self) -> None:
        self._buf = io.BytesIO()
        self._failed = False

    def write(self, data: bytes) -> int:
        if not self._failed:
            self._failed = True
            self._buf.write(data[: len(data) // 2])
            raise OSError(28, "No space left on device")
        return self._buf.write(data)

    def flush(self) -> None:
        pass

    def getvalue(self) -> bytes:
        return self._buf.getvalue()


@pytest.fixture
def make_half_line_writer() -> type[HalfLineWriter]:
    return HalfLineWriter
