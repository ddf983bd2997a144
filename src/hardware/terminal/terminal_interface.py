# hardware/terminal/terminal_interface.py
"""
ITerminal Protocol
==================
Hardware abstraction for the text output device.
Minimal contract the playback engine and terminal session rely on.
"""

from __future__ import annotations
from typing import Protocol, Tuple


class ITerminal(Protocol):
    """
    Protocol defining the minimal terminal interface.

    All implementations must provide:
    - size: current (columns, rows), read fresh on every call
    - clear / hide_cursor / show_cursor: screen and cursor primitives
    - write_raw: buffer bytes (no immediate output)
    - flush: push buffered bytes to the device
    """

    def size(self) -> Tuple[int, int]:
        """Current terminal dimensions as (columns, rows)."""
        ...

    def clear(self) -> None:
        """Erase the screen and home the cursor."""
        ...

    def hide_cursor(self) -> None:
        ...

    def show_cursor(self) -> None:
        ...

    def write_raw(self, data: bytes) -> None:
        """
        Queue raw bytes for output (does not push to the device).
        Call flush() to render.
        """
        ...

    def flush(self) -> None:
        """Push queued bytes to the device."""
        ...
