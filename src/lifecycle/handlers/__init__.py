from .playback_shutdown_handler import PlaybackShutdownHandler

__all__ = [
    "PlaybackShutdownHandler",
]
