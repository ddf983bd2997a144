from __future__ import annotations

import shutil
import sys
from typing import BinaryIO, Optional, TextIO, Tuple

from hardware.terminal.terminal_interface import ITerminal
from runtime.runtime_info import RuntimeInfo
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TERMINAL)

ESC = "\x1b"
CLEAR_SCREEN = f"{ESC}[2J{ESC}[H".encode()
HIDE_CURSOR = f"{ESC}[?25l".encode()
SHOW_CURSOR = f"{ESC}[?25h".encode()


class AnsiTerminal(ITerminal):
    """
    VT100/ANSI terminal on stdout.

    Writes go to the binary stdout buffer and only reach the device on
    flush(), so one frame costs one flush. Input can be switched to cbreak
    mode (no echo, no line buffering) while playing; restore() puts the
    saved termios settings back.
    """

    def __init__(
        self,
        output: Optional[BinaryIO] = None,
        input_stream: Optional[TextIO] = None,
        fallback_size: Tuple[int, int] = (80, 24),
    ):
        self._out = output if output is not None else sys.stdout.buffer
        self._in = input_stream if input_stream is not None else sys.stdin
        self._fallback_size = fallback_size
        self._old_settings = None

    def size(self) -> Tuple[int, int]:
        columns, rows = shutil.get_terminal_size(self._fallback_size)
        return columns, rows

    def clear(self) -> None:
        self._out.write(CLEAR_SCREEN)
        self._out.flush()

    def hide_cursor(self) -> None:
        self._out.write(HIDE_CURSOR)
        self._out.flush()

    def show_cursor(self) -> None:
        self._out.write(SHOW_CURSOR)
        self._out.flush()

    def write_raw(self, data: bytes) -> None:
        self._out.write(data)

    def flush(self) -> None:
        self._out.flush()

    # === Input mode ===

    def enter_cbreak(self) -> bool:
        """
        Switch stdin to cbreak mode so key presses are not echoed over the frame.

        Returns:
            False when stdin is not a TTY (nothing changed)
        """
        if not RuntimeInfo.has_termios():
            log.debug("termios not available, leaving input mode unchanged")
            return False
        if not self._in.isatty():
            log.debug("STDIN is not a TTY, leaving input mode unchanged")
            return False

        import termios
        import tty

        self._old_settings = termios.tcgetattr(self._in)
        tty.setcbreak(self._in.fileno())
        log.debug("Terminal input switched to cbreak mode")
        return True

    def restore(self) -> None:
        """Restore terminal settings saved by enter_cbreak()."""
        if self._old_settings is None:
            return

        import termios

        termios.tcsetattr(self._in, termios.TCSADRAIN, self._old_settings)
        self._old_settings = None
        log.debug("Terminal settings restored")
