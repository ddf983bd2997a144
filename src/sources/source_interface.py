# sources/source_interface.py
"""
IFrameSource Protocol
=====================
Contract for anything that turns a video into raster images.
The player does not care whether frames come from a process pipe,
a file or an in-memory decoder.
"""

from __future__ import annotations
from typing import List, Protocol

from models.frame import RasterImage


class IFrameSource(Protocol):

    def extract(self, source_path: str, duration_seconds: float, target_fps: int) -> List[RasterImage]:
        """
        Decode up to duration_seconds of video, sampled at target_fps.

        Raises:
            DecodeError: dimensions unknown or decoder unavailable
        """
        ...
