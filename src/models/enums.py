"""
Enums for the terminal playback engine
"""

from enum import Enum, auto


class PacingPolicy(Enum):
    """
    Frame selection strategy used by the playback loop

    ELAPSED: pick the frame that should be visible right now (skips frames under load)
    SEQUENTIAL: show every frame in order, re-aligning sleeps to frame boundaries
    """
    ELAPSED = auto()
    SEQUENTIAL = auto()


class DrawMode(Enum):
    """How a frame reached the terminal"""
    FULL = auto()      # No previous frame, every row written
    DIFF = auto()      # Only changed rows written


class TerminalKind(Enum):
    """Terminal implementations available to the factory"""
    ANSI = auto()      # Real terminal on stdout
    VIRTUAL = auto()   # In-memory terminal (dry runs, tests)


class StopReason(Enum):
    """Why the playback loop ended"""
    DURATION = auto()      # Configured wall-clock duration elapsed
    EXHAUSTED = auto()     # Sequence shown once (loop disabled)
    REQUESTED = auto()     # stop() called (signal, shutdown handler)


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()        # Configuration loading, validation
    SOURCE = auto()        # ffprobe / ffmpeg frame extraction
    CONVERSION = auto()    # Raster → text-art conversion
    FRAME_STORE = auto()
    GEOMETRY = auto()      # Padding, adaptive sizing
    RENDER = auto()        # Diff renderer
    PACING = auto()        # Playback loop timing
    TERMINAL = auto()      # Terminal modes, output sink

    LIFECYCLE = auto()
    SHUTDOWN = auto()
    SYSTEM = auto()        # Startup, shutdown, errors

    GENERAL = auto()       # Default general category
