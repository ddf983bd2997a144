"""
FrameStore — ordered, read-only collection of converted frames.

Built once at startup from the converter output and never mutated while
playing. Index validity is the caller's job (the playback loop always
reduces indices modulo len(store)).
"""

from __future__ import annotations
from typing import Iterable, Iterator, Sequence, Tuple, Union

from models.frame import Frame
from models.errors import EmptyInputError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.FRAME_STORE)

FrameLike = Union[Frame, Sequence[str]]


class FrameStore:

    def __init__(self, frames: Tuple[Frame, ...]):
        if not frames:
            raise EmptyInputError("Frame store needs at least one frame")
        self._frames = frames

    @classmethod
    def load(cls, frames: Iterable[FrameLike]) -> "FrameStore":
        """
        Build a store from converted frames.

        Accepts Frame objects or plain sequences of lines.

        Raises:
            EmptyInputError: frames is empty
        """
        normalized = tuple(
            f if isinstance(f, Frame) else Frame.from_lines(f)
            for f in frames
        )
        if not normalized:
            log.error("No frames to load")
            raise EmptyInputError("Frame store needs at least one frame")

        rows = {f.row_count for f in normalized}
        if len(rows) > 1:
            log.warn("Frames have different row counts", row_counts=sorted(rows))

        log.info(f"Frame store loaded: {len(normalized)} frames", rows=normalized[0].row_count)
        return cls(normalized)

    def get(self, index: int) -> Frame:
        return self._frames[index]

    @property
    def first(self) -> Frame:
        return self._frames[0]

    @property
    def row_count(self) -> int:
        return self._frames[0].row_count

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, index: int) -> Frame:
        return self._frames[index]

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __repr__(self) -> str:
        return f"FrameStore(frames={len(self._frames)}, rows={self.row_count})"
