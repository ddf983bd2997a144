"""
Geometry — centering a fixed-size text grid inside the terminal.

Two jobs:
  - padding: top/left offsets that center an already converted frame
  - adaptive sizing: column budget for the converter, derived from the
    terminal before any frame exists

Terminal size is read on every call; a resize between sessions is picked up,
a resize during playback is not.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from hardware.terminal.terminal_interface import ITerminal
from models.frame import Frame
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.GEOMETRY)

ESC = "\x1b"

# Measured line width is divided by this before centering. It matches the
# converter's output density, not a property of escape sequences.
DEFAULT_WIDTH_DIVISOR = 3

ADAPTIVE_FALLBACK_COLUMNS = 80


@dataclass(frozen=True)
class Padding:
    """Blank rows above and blank columns left of the frame (0-based offsets)."""
    top: int = 0
    left: int = 0


def strip_escape_sequences(line: str) -> str:
    """
    Remove terminal escape sequences.

    A sequence starts at ESC and runs up to and including the first ASCII
    letter, so both "\\x1b[31m" and "\\x1b[38;2;1;2;3m" disappear entirely.
    """
    result = []
    in_escape = False

    for c in line:
        if c == ESC:
            in_escape = True
            continue
        if in_escape:
            if c.isascii() and c.isalpha():
                in_escape = False
            continue
        result.append(c)

    return "".join(result)


def visible_width(lines: Iterable[str]) -> int:
    """Widest line after stripping escapes and surrounding whitespace (empty lines ignored)."""
    widths = [
        len(trimmed)
        for trimmed in (strip_escape_sequences(line).strip() for line in lines)
        if trimmed
    ]
    return max(widths, default=0)


def vertical_padding(terminal_rows: int, frame_row_count: int) -> int:
    if terminal_rows > frame_row_count:
        return (terminal_rows - frame_row_count) // 2
    return 0


def horizontal_padding(
    terminal_columns: int,
    lines: Iterable[str],
    width_divisor: int = DEFAULT_WIDTH_DIVISOR,
) -> int:
    scaled_width = visible_width(lines) // width_divisor
    if terminal_columns > scaled_width:
        return (terminal_columns - scaled_width) // 2
    return 0


def adaptive_target_columns(terminal_columns: int, terminal_rows: int) -> int:
    """
    Column budget for the converter when no fixed size is configured.

    Falls back to 80 when the terminal reports nothing usable.
    """
    target = min(terminal_columns * 2, terminal_rows * 8 // 10) * 4
    if target <= 0:
        return ADAPTIVE_FALLBACK_COLUMNS
    return target


class GeometryCalculator:
    """Padding and adaptive sizing against a live terminal."""

    def __init__(self, terminal: ITerminal, width_divisor: int = DEFAULT_WIDTH_DIVISOR):
        if width_divisor <= 0:
            raise ValueError(f"width_divisor must be positive, got {width_divisor}")
        self.terminal = terminal
        self.width_divisor = width_divisor

    def padding(self, frame: Frame) -> Padding:
        columns, rows = self.terminal.size()
        result = Padding(
            top=vertical_padding(rows, frame.row_count),
            left=horizontal_padding(columns, frame.lines, self.width_divisor),
        )
        log.debug(
            "Padding computed",
            terminal=f"{columns}x{rows}",
            frame_rows=frame.row_count,
            top=result.top,
            left=result.left,
        )
        return result

    def target_columns(self) -> int:
        columns, rows = self.terminal.size()
        target = adaptive_target_columns(columns, rows)
        log.info("Adaptive target size", terminal=f"{columns}x{rows}", target_columns=target)
        return target
