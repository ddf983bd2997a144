"""
Tests for terminal implementations and the terminal factory.
"""

import io
import os
from unittest.mock import patch

from hardware.terminal.ansi_terminal import (
    AnsiTerminal,
    CLEAR_SCREEN,
    HIDE_CURSOR,
    SHOW_CURSOR,
)
from hardware.terminal.terminal_factory import create_terminal
from hardware.terminal.virtual_terminal import VirtualTerminal
from models.enums import TerminalKind


class FakeStdin(io.StringIO):
    def isatty(self):
        return False


class TestVirtualTerminal:

    def test_writes_buffered_until_flush(self):
        term = VirtualTerminal()

        term.write_raw(b"abc")

        assert term.pending == b"abc"
        assert term.flushes == []

        term.flush()
        assert term.flushes == [b"abc"]
        assert term.pending == b""

    def test_empty_flush_not_recorded(self):
        term = VirtualTerminal()

        term.flush()

        assert term.flushes == []

    def test_cursor_and_clear(self):
        term = VirtualTerminal(columns=100, rows=40)

        term.hide_cursor()
        term.clear()

        assert term.cursor_visible is False
        assert term.clear_count == 1
        assert term.size() == (100, 40)

    def test_history_is_bounded(self):
        term = VirtualTerminal(history=3)

        for i in range(10):
            term.write_raw(b"frame %d" % i)
            term.flush()

        assert term.flushes == [b"frame 7", b"frame 8", b"frame 9"]
        assert term.flush_count == 10
        assert term.bytes_flushed == 70


class TestAnsiTerminal:

    def test_escape_sequences(self):
        out = io.BytesIO()
        term = AnsiTerminal(output=out, input_stream=FakeStdin())

        term.clear()
        term.hide_cursor()
        term.show_cursor()

        assert out.getvalue() == CLEAR_SCREEN + HIDE_CURSOR + SHOW_CURSOR
        assert HIDE_CURSOR == b"\x1b[?25l"
        assert SHOW_CURSOR == b"\x1b[?25h"

    def test_write_raw(self):
        out = io.BytesIO()
        term = AnsiTerminal(output=out, input_stream=FakeStdin())

        term.write_raw(b"\x1b[1;1HA")
        term.flush()

        assert out.getvalue() == b"\x1b[1;1HA"

    def test_size_uses_terminal_size(self):
        term = AnsiTerminal(output=io.BytesIO(), input_stream=FakeStdin())

        with patch("shutil.get_terminal_size", return_value=os.terminal_size((120, 40))):
            assert term.size() == (120, 40)

    def test_cbreak_skipped_without_tty(self):
        term = AnsiTerminal(output=io.BytesIO(), input_stream=FakeStdin())

        assert term.enter_cbreak() is False
        term.restore()


class TestTerminalFactory:

    def test_virtual_when_requested(self):
        term = create_terminal(kind=TerminalKind.VIRTUAL, columns=100, rows=30)

        assert isinstance(term, VirtualTerminal)
        assert term.size() == (100, 30)

    def test_ansi_when_requested(self):
        assert isinstance(create_terminal(kind=TerminalKind.ANSI), AnsiTerminal)

    def test_ansi_when_stdout_is_a_pipe(self):
        """Piped or redirected output still gets the escape stream."""
        with patch("runtime.runtime_info.RuntimeInfo.stdout_is_tty", return_value=False):
            assert isinstance(create_terminal(), AnsiTerminal)
