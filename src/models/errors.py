"""
Error taxonomy for the player.

Every failure in the playback core is non-transient (malformed input or an
unavailable terminal), so nothing here is retried. Errors carry a stable
code plus structured details, the same way API domain errors do.
"""

from typing import Optional


class PlayerError(Exception):
    """Base class for player errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class EmptyInputError(PlayerError):
    """No frames to play"""
    def __init__(self, message: str = "No frames to play"):
        super().__init__(
            code="EMPTY_INPUT",
            message=message,
        )


class DecodeError(PlayerError):
    """Frame source could not produce geometry or frame data"""
    def __init__(self, message: str, source: Optional[str] = None, **details):
        if source is not None:
            details["source"] = source
        super().__init__(
            code="DECODE_ERROR",
            message=message,
            details=details,
        )


class TerminalIOError(PlayerError):
    """Terminal setup, write or flush failed"""
    def __init__(self, message: str, operation: str):
        super().__init__(
            code="TERMINAL_IO",
            message=message,
            details={"operation": operation},
        )
