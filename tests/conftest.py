import asyncio
import io

import pytest

from hardware.terminal.virtual_terminal import VirtualTerminal
from utils.logger import get_logger


class FakeClock:
    """
    Manually advanced monotonic clock.

    sleep() advances time by the requested amount and yields once to the
    event loop, so other tasks (stop requests, shutdown) still get to run.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


class FailingTerminal(VirtualTerminal):
    """Virtual terminal whose write or flush raises OSError on demand."""

    def __init__(self, columns=80, rows=24, fail_write=False, fail_flush=False):
        super().__init__(columns, rows)
        self.fail_write = fail_write
        self.fail_flush = fail_flush

    def write_raw(self, data: bytes) -> None:
        if self.fail_write:
            raise OSError("broken pipe")
        super().write_raw(data)

    def flush(self) -> None:
        if self.fail_flush:
            raise OSError("device gone")
        super().flush()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def terminal():
    """80x24 in-memory terminal."""
    return VirtualTerminal(columns=80, rows=24)


@pytest.fixture(autouse=True)
def log_stream():
    """Route log output to a buffer; undo any hold() a test left behind."""
    logger = get_logger()
    stream = io.StringIO()
    previous = logger._stream
    logger.stream = stream
    yield stream
    if logger.is_held:
        logger.release()
    logger.stream = previous


@pytest.fixture
def failing_terminal():
    """Factory for terminals that fail on write or flush."""
    return FailingTerminal
