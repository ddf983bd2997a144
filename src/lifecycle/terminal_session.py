"""
TerminalSession — scoped terminal modes for the duration of playback.

On entry:  hold logs, clear screen, hide cursor, cbreak input (real TTY only)
On exit:   show cursor, restore input settings, park the cursor below the
           frame, release held logs

Exit steps run on every path, including exceptions raised by the loop.
"""

from __future__ import annotations
from typing import Optional

from hardware.terminal.terminal_interface import ITerminal
from models.errors import TerminalIOError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TERMINAL)


class TerminalSession:

    def __init__(self, terminal: ITerminal, hold_logs: bool = True):
        self.terminal = terminal
        self.hold_logs = hold_logs
        self.active = False
        self._cbreak = False

    def __enter__(self) -> "TerminalSession":
        if self.hold_logs:
            get_logger().hold()

        try:
            enter_cbreak = getattr(self.terminal, "enter_cbreak", None)
            if enter_cbreak is not None:
                self._cbreak = bool(enter_cbreak())

            for name, step in (("clear", self.terminal.clear), ("hide_cursor", self.terminal.hide_cursor)):
                try:
                    step()
                except OSError as e:
                    raise TerminalIOError(f"Terminal setup failed: {e}", operation=name) from e
        except BaseException:
            self.__exit__(None, None, None)
            raise

        self.active = True
        log.debug("Terminal session started", cbreak=self._cbreak)
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        try:
            self._restore()
        finally:
            self.active = False
            if self.hold_logs:
                get_logger().release()
        return None

    def _restore(self) -> None:
        errors = []

        # Cursor first: it is the one thing that must not stay hidden
        steps = (
            ("show_cursor", self.terminal.show_cursor),
            ("park_cursor", self._park_cursor),
            ("restore_input", self._restore_input),
        )
        for name, step in steps:
            try:
                step()
            except OSError as e:
                errors.append(e)
                log.error(f"Terminal restore step failed: {e}", step=name)

        log.debug("Terminal session ended", errors=len(errors))

    def _park_cursor(self) -> None:
        _, rows = self.terminal.size()
        self.terminal.write_raw(f"\x1b[{rows};1H\n".encode())
        self.terminal.flush()

    def _restore_input(self) -> None:
        restore = getattr(self.terminal, "restore", None)
        if self._cbreak and restore is not None:
            restore()
            self._cbreak = False
