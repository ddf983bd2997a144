from .source_interface import IFrameSource
from .ffmpeg_source import FFmpegFrameSource

__all__ = [
    "IFrameSource",
    "FFmpegFrameSource",
]
