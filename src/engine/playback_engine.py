"""
PlaybackEngine — real-time playback loop for text-art frames.

Architecture:
  - FrameStore holds every converted frame (read-only)
  - GeometryCalculator centers the grid once, before the first tick
  - Pacing policy picks the frame index for each tick
  - DiffRenderer writes only the rows that changed
  - The loop sleeps for whatever is left of the frame budget

Termination:
  - configured wall-clock duration elapsed
  - single pass finished (loop disabled)
  - stop() requested, honoured at the next tick boundary

Single task, single writer: nothing else may write to the terminal while
run() is active.
"""

from __future__ import annotations
import asyncio
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Dict, Iterable, Optional, Union

from engine.diff_renderer import DiffRenderer
from engine.frame_store import FrameStore, FrameLike
from engine.geometry import GeometryCalculator, Padding, DEFAULT_WIDTH_DIVISOR
from engine.pacing import PlaybackClock, Clock, create_policy
from hardware.terminal.terminal_interface import ITerminal
from models.enums import PacingPolicy, StopReason
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PACING)

Sleep = Callable[[float], Awaitable[None]]


class PlaybackEngine:
    """
    Plays a FrameStore on a terminal at a fixed frame rate.

    Example:
        engine = PlaybackEngine(terminal, fps=24, duration=90.0)
        reason = await engine.run(store)
    """

    def __init__(
        self,
        terminal: ITerminal,
        fps: float = 24,
        policy: PacingPolicy = PacingPolicy.ELAPSED,
        loop: bool = True,
        duration: Optional[float] = None,
        width_divisor: int = DEFAULT_WIDTH_DIVISOR,
        clock: Clock = time.perf_counter,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Args:
            terminal: Output device (exclusively owned while playing)
            fps: Target frame rate
            policy: ELAPSED (drop frames, stay in sync) or SEQUENTIAL (show every frame)
            loop: Wrap around at the end of the sequence
            duration: Stop after this many seconds (None = no limit)
            width_divisor: Calibration constant for horizontal centering
            clock: Monotonic time source in seconds
            sleep: Awaitable sleep used between frames
        """
        if duration is not None and duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")

        self.terminal = terminal
        self.fps = fps
        self.loop = loop
        self.duration = duration

        self.clock = PlaybackClock(fps, clock)
        self.policy = create_policy(policy, loop=loop)
        self.renderer = DiffRenderer(terminal)
        self.geometry = GeometryCalculator(terminal, width_divisor)
        self._sleep = sleep

        # Runtime state
        self.running = False
        self._stop_requested = False
        self.padding: Optional[Padding] = None
        self.current_index: Optional[int] = None
        self.stop_reason: Optional[StopReason] = None

        # Timing & performance metrics
        self.frame_times: Deque[float] = deque(maxlen=240)
        self.ticks = 0
        self.overruns = 0

        log.info(
            "PlaybackEngine initialized",
            fps=fps,
            policy=policy.name,
            loop=loop,
            duration=duration,
        )

    # === Control API ===

    def stop(self) -> None:
        """Ask the loop to end at the next tick boundary."""
        self._stop_requested = True

    # === Core Loop ===

    async def run(self, frames: Union[FrameStore, Iterable[FrameLike]]) -> StopReason:
        """
        Play frames until a termination condition is met.

        Raises:
            EmptyInputError: no frames (raised before the loop starts)
            TerminalIOError: terminal write/flush failed mid-loop
        """
        store = frames if isinstance(frames, FrameStore) else FrameStore.load(frames)
        frame_count = len(store)

        self.padding = self.geometry.padding(store.first)
        self.renderer.reset()
        self.policy.reset()
        self._stop_requested = False
        self.stop_reason = None
        self.running = True

        log.info(
            f"Playback loop @ {self.fps} FPS (interval={self.clock.frame_interval * 1000:.2f}ms)",
            frames=frame_count,
            top=self.padding.top,
            left=self.padding.left,
        )

        self.clock.start()
        try:
            while True:
                if self._stop_requested:
                    self.stop_reason = StopReason.REQUESTED
                    break

                tick_start = self.clock.now()
                if self.duration is not None and self.clock.elapsed() >= self.duration:
                    self.stop_reason = StopReason.DURATION
                    break

                index = self.policy.next_index(self.clock, frame_count)
                if index is None:
                    self.stop_reason = StopReason.EXHAUSTED
                    break

                self.current_index = index
                self.renderer.draw(store.get(index), self.padding.top, self.padding.left)
                self.ticks += 1
                self.frame_times.append(self.clock.now())

                delay = self.policy.sleep_time(self.clock, tick_start)
                if self.clock.now() - tick_start > self.clock.frame_interval:
                    self.overruns += 1
                # Zero or negative delay: proceed immediately, still yield to the event loop
                await self._sleep(max(0.0, delay))
        finally:
            self.running = False

        log.info(
            "Playback finished",
            reason=self.stop_reason.name,
            **self.get_metrics(),
        )
        return self.stop_reason

    # === Metrics ===

    def get_actual_fps(self) -> float:
        """Measured FPS over recent frames."""
        if len(self.frame_times) < 2:
            return 0.0
        duration = self.frame_times[-1] - self.frame_times[0]
        if duration <= 0:
            return 0.0
        return (len(self.frame_times) - 1) / duration

    def get_metrics(self) -> Dict:
        state = self.renderer.state
        return {
            "fps_target": self.fps,
            "fps_actual": round(self.get_actual_fps(), 2),
            "ticks": self.ticks,
            "frames_drawn": state.frames_drawn,
            "lines_written": state.lines_written,
            "lines_skipped": state.lines_skipped,
            "dropped_frames": self.policy.dropped_frames,
            "overruns": self.overruns,
        }

    def __repr__(self) -> str:
        metrics = self.get_metrics()
        return (
            f"PlaybackEngine(fps={metrics['fps_actual']:.1f}/{metrics['fps_target']}, "
            f"policy={self.policy.kind.name}, "
            f"drawn={metrics['frames_drawn']}, "
            f"dropped={metrics['dropped_frames']})"
        )
