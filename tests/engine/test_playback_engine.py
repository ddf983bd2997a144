"""
Tests for PlaybackEngine (the real-time loop).

All tests inject a fake clock and sleep (fps=4, interval 0.25s) so pacing
is deterministic and nothing actually waits.
"""

import asyncio
import io
import os
from unittest.mock import patch

import pytest

from engine.frame_store import FrameStore
from engine.playback_engine import PlaybackEngine
from hardware.terminal.ansi_terminal import AnsiTerminal
from hardware.terminal.virtual_terminal import VirtualTerminal
from lifecycle.terminal_session import TerminalSession
from models.enums import PacingPolicy, StopReason
from models.errors import EmptyInputError, TerminalIOError


def make_engine(terminal, clock, **kwargs):
    kwargs.setdefault("fps", 4)
    return PlaybackEngine(terminal, clock=clock, sleep=clock.sleep, **kwargs)


FRAMES = [["A", "B"], ["A", "C"], ["D", "C"]]


class TestPlaybackEngineTermination:

    @pytest.mark.asyncio
    async def test_single_pass_elapsed(self, terminal, clock):
        engine = make_engine(terminal, clock, loop=False)

        reason = await engine.run(FRAMES)

        assert reason == StopReason.EXHAUSTED
        assert engine.ticks == 3
        assert engine.renderer.state.frames_drawn == 3
        assert engine.running is False

    @pytest.mark.asyncio
    async def test_single_pass_sequential(self, terminal, clock):
        engine = make_engine(terminal, clock, loop=False, policy=PacingPolicy.SEQUENTIAL)

        reason = await engine.run(FRAMES)

        assert reason == StopReason.EXHAUSTED
        assert engine.ticks == 3
        assert clock.sleeps == [0.25, 0.25, 0.25]

    @pytest.mark.asyncio
    async def test_duration_limit(self, terminal, clock):
        engine = make_engine(terminal, clock, loop=True, duration=1.0)

        reason = await engine.run(FRAMES[:2])

        assert reason == StopReason.DURATION
        assert engine.ticks == 4

    @pytest.mark.asyncio
    async def test_stop_request(self, terminal, clock):
        engine = make_engine(terminal, clock)

        async def stop_after_three(seconds):
            await clock.sleep(seconds)
            if len(clock.sleeps) == 3:
                engine.stop()

        engine._sleep = stop_after_three
        reason = await engine.run(FRAMES)

        assert reason == StopReason.REQUESTED
        assert engine.ticks == 3

    def test_invalid_duration(self, terminal, clock):
        with pytest.raises(ValueError):
            make_engine(terminal, clock, duration=0)


class TestPlaybackEngineOutput:

    @pytest.mark.asyncio
    async def test_frames_centered_and_diffed(self, terminal, clock):
        engine = make_engine(terminal, clock, loop=False)

        await engine.run(FRAMES)

        # 2-row frame in 24 rows -> top 11; width 1 // 3 = 0 -> left 40
        assert terminal.flushes == [
            b"\x1b[12;41HA\x1b[13;41HB",
            b"\x1b[13;41HC",
            b"\x1b[12;41HD",
        ]
        assert engine.renderer.state.lines_written == 4
        assert engine.renderer.state.lines_skipped == 2

    @pytest.mark.asyncio
    async def test_elapsed_policy_drops_frames_under_load(self, terminal, clock):
        """Each draw costs 0.6s (more than two intervals): frames are skipped."""
        engine = make_engine(terminal, clock, loop=False)
        original_flush = terminal.flush

        def slow_flush():
            original_flush()
            clock.advance(0.6)

        terminal.flush = slow_flush
        await engine.run([[str(i)] for i in range(8)])

        # Ticks start at 0.0, 0.6, 1.2, 1.8 -> frame numbers 0, 2, 4, 7
        assert engine.current_index == 7
        assert engine.ticks == 4
        assert engine.policy.dropped_frames == 4
        assert engine.overruns == 4
        assert clock.sleeps == [0.0, 0.0, 0.0, 0.0]

    @pytest.mark.asyncio
    async def test_metrics(self, terminal, clock):
        engine = make_engine(terminal, clock, loop=False)

        await engine.run(FRAMES)
        metrics = engine.get_metrics()

        assert metrics["ticks"] == 3
        assert metrics["frames_drawn"] == 3
        assert metrics["fps_actual"] == 4.0
        assert "dropped=0" in repr(engine)

    @pytest.mark.asyncio
    async def test_long_dry_run_keeps_bounded_history(self, clock):
        terminal = VirtualTerminal(history=8)
        engine = make_engine(terminal, clock, duration=60.0)

        await engine.run([["row %d" % i] for i in range(10)])

        assert engine.ticks == 240
        assert terminal.flush_count == 240
        assert len(terminal.flushes) == 8

    @pytest.mark.asyncio
    async def test_ansi_terminal_writes_to_pipe(self, clock):
        pipe = io.BytesIO()
        stdin = io.StringIO()
        terminal = AnsiTerminal(output=pipe, input_stream=stdin)
        engine = make_engine(terminal, clock, loop=False)

        with patch("shutil.get_terminal_size", return_value=os.terminal_size((80, 24))):
            with TerminalSession(terminal):
                await engine.run(FRAMES)

        output = pipe.getvalue()
        assert b"\x1b[12;41HA\x1b[13;41HB" in output
        assert output.endswith(b"\x1b[?25h\x1b[24;1H\n")


class TestPlaybackEngineErrors:

    @pytest.mark.asyncio
    async def test_empty_input_never_enters_loop(self, terminal, clock):
        engine = make_engine(terminal, clock)

        with pytest.raises(EmptyInputError):
            await engine.run([])

        assert engine.ticks == 0
        assert terminal.flushes == []
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_terminal_failure_restores_cursor(self, failing_terminal, clock):
        term = failing_terminal(fail_flush=True)
        engine = make_engine(term, clock)

        with pytest.raises(TerminalIOError):
            with TerminalSession(term):
                await engine.run(FRAMES)

        assert term.cursor_visible is True
        assert engine.running is False
        assert engine.renderer.last_frame is None

    @pytest.mark.asyncio
    async def test_runs_as_task(self, terminal, clock):
        engine = make_engine(terminal, clock)
        task = asyncio.create_task(engine.run(FrameStore.load(FRAMES)))

        await asyncio.sleep(0)
        while engine.ticks < 2:
            await asyncio.sleep(0)
        engine.stop()

        assert await task == StopReason.REQUESTED
