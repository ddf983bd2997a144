"""
DiffRenderer — line-granularity redraw against the previous frame.

Each draw:
  1. Compare current rows with last_frame (exact string comparison,
     styling escapes included)
  2. Queue "cursor position + row text" for every changed row
  3. Hand the whole batch to the terminal as one write + one flush
  4. Remember current as last_frame

One changed character rewrites its whole row. At ~24 fps and text-art
resolution that costs less than tracking individual cells.
"""

from __future__ import annotations
from typing import List, Optional

from hardware.terminal.terminal_interface import ITerminal
from engine.render_state import RenderState
from models.enums import DrawMode
from models.errors import TerminalIOError
from models.frame import Frame
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RENDER)

ESC = "\x1b"


def cursor_position(row: int, column: int) -> str:
    """
    CUP sequence; row/column are 1-based terminal coordinates.

    Callers pass top + r + 1 and left + 1: with 0-based values, row 0 and
    row 1 both land on the first line.
    """
    return f"{ESC}[{row};{column}H"


def changed_rows(previous: Optional[Frame], current: Frame) -> List[int]:
    """
    Row indices of current that must be written.

    Every row when there is no previous frame; rows past the end of the
    previous frame are always included.
    """
    if previous is None:
        return list(range(current.row_count))

    prev_rows = previous.row_count
    return [
        row
        for row, line in enumerate(current.lines)
        if row >= prev_rows or previous.lines[row] != line
    ]


class DiffRenderer:
    """
    Writes frames to a terminal, skipping rows that did not change.

    Offsets passed to draw() are 0-based padding (blank rows/columns before
    the frame); row r of the frame lands on terminal line top + r + 1.
    """

    def __init__(self, terminal: ITerminal, state: Optional[RenderState] = None):
        self.terminal = terminal
        self.state = state or RenderState()

    @property
    def last_frame(self) -> Optional[Frame]:
        return self.state.last_frame

    @staticmethod
    def _encode(current: Frame, rows: List[int], top: int, left: int) -> bytes:
        parts = []
        for row in rows:
            parts.append(cursor_position(top + row + 1, left + 1))
            parts.append(current.lines[row])
        return "".join(parts).encode("utf-8")

    def build_output(self, current: Frame, top: int = 0, left: int = 0) -> bytes:
        """Encoded batch for current, without touching the terminal."""
        return self._encode(current, changed_rows(self.state.last_frame, current), top, left)

    def draw(self, current: Frame, top: int = 0, left: int = 0) -> int:
        """
        Bring the terminal to current's state.

        Returns:
            Number of rows written (0 when nothing changed)

        Raises:
            TerminalIOError: write or flush failed; last_frame is left as it was
        """
        previous = self.state.last_frame
        rows = changed_rows(previous, current)
        mode = DrawMode.FULL if previous is None else DrawMode.DIFF

        if rows:
            payload = self._encode(current, rows, top, left)

            try:
                self.terminal.write_raw(payload)
            except OSError as e:
                raise TerminalIOError(f"Terminal write failed: {e}", operation="write") from e
            try:
                self.terminal.flush()
            except OSError as e:
                raise TerminalIOError(f"Terminal flush failed: {e}", operation="flush") from e

        self.state.record_draw(
            current,
            mode,
            written=len(rows),
            skipped=current.row_count - len(rows),
        )
        return len(rows)

    def reset(self) -> None:
        self.state.reset()
