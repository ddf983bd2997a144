"""
RenderState — runtime record of what the terminal currently shows (not persisted).

Owned by DiffRenderer and touched only from the playback loop. Lets the
renderer:
- Detect changed rows (line-by-line comparison against last_frame)
- Skip identical redraws entirely
- Report how much output diffing saved

Warstwa: ENGINE / RENDER STATE
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from models.enums import DrawMode
from models.frame import Frame


@dataclass
class RenderState:
    """
    Attributes:
        last_frame: Frame currently on screen (None before the first draw)
        last_mode: Whether the last draw was FULL or DIFF
        frames_drawn: Successful draw() calls
        lines_written: Rows sent to the terminal
        lines_skipped: Rows left untouched because they matched
    """

    last_frame: Optional[Frame] = None
    last_mode: Optional[DrawMode] = None
    frames_drawn: int = 0
    lines_written: int = 0
    lines_skipped: int = 0

    def record_draw(self, frame: Frame, mode: DrawMode, written: int, skipped: int) -> None:
        self.last_frame = frame
        self.last_mode = mode
        self.frames_drawn += 1
        self.lines_written += written
        self.lines_skipped += skipped

    def reset(self) -> None:
        """Forget the screen contents; the next draw is a full draw."""
        self.last_frame = None
        self.last_mode = None

    def __repr__(self) -> str:
        return (
            f"RenderState(rows={self.last_frame.row_count if self.last_frame else None}, "
            f"frames_drawn={self.frames_drawn}, "
            f"lines_written={self.lines_written}, "
            f"lines_skipped={self.lines_skipped})"
        )
