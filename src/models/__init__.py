"""
Models package - Data models for the terminal playback engine
"""

from .enums import PacingPolicy, DrawMode, TerminalKind, StopReason, LogLevel, LogCategory
from .frame import Frame, RasterImage
from .errors import PlayerError, EmptyInputError, DecodeError, TerminalIOError

__all__ = [
    'PacingPolicy',
    'DrawMode',
    'TerminalKind',
    'StopReason',
    'LogLevel',
    'LogCategory',
    'Frame',
    'RasterImage',
    'PlayerError',
    'EmptyInputError',
    'DecodeError',
    'TerminalIOError',
]
