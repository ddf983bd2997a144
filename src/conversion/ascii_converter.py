"""
AsciiConverter — one RasterImage in, one text-art Frame out.

Steps:
  1. Resize to target_columns x rows (rows follow the image aspect ratio,
     scaled by cell_aspect because terminal cells are taller than wide)
  2. Map Rec. 709 luminance onto the character ramp (dark → light)
  3. Optionally color each character with a 24-bit foreground escape;
     the escape is only repeated when the color changes along the row

Runs once per frame at load time, never during playback.
"""

from __future__ import annotations
import time
from typing import Iterable, List

import numpy as np
from PIL import Image

from models.frame import Frame, RasterImage
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONVERSION)

ESC = "\x1b"
RESET = f"{ESC}[0m"

DEFAULT_CHARACTERS = " .:-=+*#%@"
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float32)


def fg_color(r: int, g: int, b: int) -> str:
    return f"{ESC}[38;2;{r};{g};{b}m"


class AsciiConverter:

    def __init__(
        self,
        characters: str = DEFAULT_CHARACTERS,
        color: bool = True,
        cell_aspect: float = 0.5,
    ):
        """
        Args:
            characters: Ramp from darkest to brightest
            color: Emit truecolor escapes per character
            cell_aspect: Cell width / cell height of the terminal font
        """
        if not characters:
            raise ValueError("characters must not be empty")
        if cell_aspect <= 0:
            raise ValueError(f"cell_aspect must be positive, got {cell_aspect}")
        self.characters = characters
        self.color = color
        self.cell_aspect = cell_aspect
        self._ramp = np.array(list(characters))

    def grid_size(self, image: RasterImage, target_columns: int) -> tuple:
        rows = max(1, round(image.height / image.width * target_columns * self.cell_aspect))
        return target_columns, rows

    def convert(self, image: RasterImage, target_columns: int) -> Frame:
        if target_columns <= 0:
            raise ValueError(f"target_columns must be positive, got {target_columns}")

        columns, rows = self.grid_size(image, target_columns)
        picture = Image.frombytes("RGB", (image.width, image.height), image.data)
        resized = picture.resize((columns, rows), Image.Resampling.BILINEAR)
        pixels = np.asarray(resized, dtype=np.uint8)

        luma = pixels.astype(np.float32) @ LUMA_WEIGHTS
        indices = (luma / 256.0 * len(self._ramp)).astype(np.intp)
        indices = np.clip(indices, 0, len(self._ramp) - 1)
        chars = self._ramp[indices]

        if not self.color:
            return Frame.from_lines("".join(row) for row in chars)

        return Frame.from_lines(
            self._colored_line(chars[y], pixels[y]) for y in range(rows)
        )

    @staticmethod
    def _colored_line(chars, pixels) -> str:
        parts: List[str] = []
        current = None
        for ch, (r, g, b) in zip(chars, pixels.tolist()):
            rgb = (r, g, b)
            if rgb != current:
                parts.append(fg_color(r, g, b))
                current = rgb
            parts.append(ch)
        parts.append(RESET)
        return "".join(parts)

    def convert_all(self, images: Iterable[RasterImage], target_columns: int) -> List[Frame]:
        start = time.perf_counter()
        frames = [self.convert(image, target_columns) for image in images]
        elapsed = time.perf_counter() - start

        log.info(
            f"Converted {len(frames)} frames in {elapsed:.2f}s",
            target_columns=target_columns,
            rows=frames[0].row_count if frames else 0,
            avg_ms=f"{(elapsed / len(frames) * 1000):.1f} ms/frame" if frames else "N/A",
        )
        return frames
