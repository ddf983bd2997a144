"""
Pacing — which frame to show next and how long to wait after it.

Two policies:

  ELAPSED (drift-correcting)
    index = floor(elapsed * fps) mod frame_count, computed fresh every tick.
    A slow tick makes the next one jump ahead: frames are dropped, playback
    never lags behind the wall clock.

  SEQUENTIAL (wait-correcting)
    index = 0, 1, 2, ... in order. The sleep re-aligns to the next frame
    boundary (interval - elapsed mod interval). Every frame is shown, but a
    tick that overruns a whole interval is never made up.
"""

from __future__ import annotations
import math
import time
from typing import Callable, Optional

from models.enums import PacingPolicy
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PACING)

Clock = Callable[[], float]


class PlaybackClock:
    """Monotonic start timestamp plus target frame interval."""

    def __init__(self, fps: float, clock: Clock = time.perf_counter):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.fps = fps
        self.frame_interval = 1.0 / fps
        self._clock = clock
        self.start_time: Optional[float] = None

    def now(self) -> float:
        return self._clock()

    def start(self) -> float:
        self.start_time = self._clock()
        return self.start_time

    def elapsed(self) -> float:
        if self.start_time is None:
            raise RuntimeError("PlaybackClock.start() was not called")
        return self._clock() - self.start_time

    def ideal_frame_number(self) -> int:
        """Frames that should have been shown since start (not wrapped)."""
        return math.floor(self.elapsed() * self.fps)

    def ideal_index(self, frame_count: int) -> int:
        return self.ideal_frame_number() % frame_count


class ElapsedTimePolicy:
    """Policy A: select by wall clock, sleep the rest of the frame budget."""

    kind = PacingPolicy.ELAPSED

    def __init__(self, loop: bool = True):
        self.loop = loop
        self.dropped_frames = 0
        self._last_number: Optional[int] = None

    def reset(self) -> None:
        self.dropped_frames = 0
        self._last_number = None

    def next_index(self, clock: PlaybackClock, frame_count: int) -> Optional[int]:
        """
        Returns:
            Frame index to show, or None once a single pass is complete (loop disabled)
        """
        number = clock.ideal_frame_number()
        if not self.loop and number >= frame_count:
            return None

        if self._last_number is not None and number > self._last_number + 1:
            self.dropped_frames += number - self._last_number - 1
        self._last_number = number

        return number % frame_count

    def sleep_time(self, clock: PlaybackClock, tick_start: float) -> float:
        spent = clock.now() - tick_start
        return max(0.0, clock.frame_interval - spent)


class SequentialPolicy:
    """Policy B: strict order, sleep until the next frame boundary."""

    kind = PacingPolicy.SEQUENTIAL

    def __init__(self, loop: bool = True):
        self.loop = loop
        self.dropped_frames = 0
        self._next = 0

    def reset(self) -> None:
        self._next = 0

    def next_index(self, clock: PlaybackClock, frame_count: int) -> Optional[int]:
        if self._next >= frame_count:
            if not self.loop:
                return None
            self._next = 0

        index = self._next
        self._next += 1
        return index

    def sleep_time(self, clock: PlaybackClock, tick_start: float) -> float:
        remainder = math.fmod(clock.elapsed(), clock.frame_interval)
        return clock.frame_interval - remainder


def create_policy(policy: PacingPolicy, loop: bool = True):
    if policy is PacingPolicy.ELAPSED:
        return ElapsedTimePolicy(loop=loop)
    if policy is PacingPolicy.SEQUENTIAL:
        return SequentialPolicy(loop=loop)
    raise ValueError(f"Unsupported pacing policy: {policy}")
