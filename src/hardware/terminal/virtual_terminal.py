from __future__ import annotations
from collections import deque
from typing import Deque, List, Tuple
from hardware.terminal.terminal_interface import ITerminal


class VirtualTerminal(ITerminal):
    """
    In-memory terminal.

    Keeps the most recent `history` flushed chunks so callers can inspect
    exactly what a frame cost; older chunks only survive as counters
    (flush_count, bytes_flushed), so a long dry run stays bounded. Size can
    be changed between calls to simulate a different window.
    """

    def __init__(
        self,
        columns: int = 80,
        rows: int = 24,
        history: int = 64,
    ):
        self.columns = columns
        self.rows = rows
        self.cursor_visible = True
        self.clear_count = 0
        self.flush_count = 0
        self.bytes_flushed = 0
        self._flushes: Deque[bytes] = deque(maxlen=history)
        self._pending = bytearray()

    def size(self) -> Tuple[int, int]:
        return self.columns, self.rows

    def clear(self) -> None:
        self.clear_count += 1

    def hide_cursor(self) -> None:
        self.cursor_visible = False

    def show_cursor(self) -> None:
        self.cursor_visible = True

    def write_raw(self, data: bytes) -> None:
        self._pending.extend(data)

    def flush(self) -> None:
        if self._pending:
            chunk = bytes(self._pending)
            self._flushes.append(chunk)
            self.flush_count += 1
            self.bytes_flushed += len(chunk)
            self._pending.clear()

    @property
    def flushes(self) -> List[bytes]:
        """Most recent flushed chunks, oldest first."""
        return list(self._flushes)

    @property
    def output(self) -> bytes:
        """Retained flushed output."""
        return b"".join(self._flushes)

    @property
    def pending(self) -> bytes:
        """Bytes written but not flushed yet."""
        return bytes(self._pending)
