"""
Frame models for the playback engine.

✔ RasterImage - one decoded RGB24 picture (frame source output)
✔ Frame       - one text-art picture, an immutable tuple of lines (converter output)
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple


# =====================================================================
# RasterImage: raw pixels handed from the frame source to the converter
# =====================================================================

@dataclass(frozen=True)
class RasterImage:
    """
    Packed RGB24 pixels, row-major, 3 bytes per pixel.
    """

    width: int
    height: int
    data: bytes

    def __post_init__(self):
        expected = self.width * self.height * 3
        if len(self.data) != expected:
            raise ValueError(
                f"RasterImage {self.width}x{self.height} needs {expected} bytes, got {len(self.data)}"
            )


# =====================================================================
# Frame: ordered text lines, may embed ANSI styling
# =====================================================================

@dataclass(frozen=True)
class Frame:
    """
    Text-art frame. Lines are kept verbatim (styling escapes included),
    diffing compares them as plain strings.
    """

    lines: Tuple[str, ...]

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Frame":
        return cls(tuple(lines))

    @classmethod
    def from_text(cls, text: str) -> "Frame":
        return cls(tuple(text.splitlines()))

    @property
    def row_count(self) -> int:
        return len(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __getitem__(self, row: int) -> str:
        return self.lines[row]
