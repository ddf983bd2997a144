"""
Playback shutdown handler.

Stops the playback loop at its next tick boundary and waits for the task
to wind down, so the terminal session only restores the screen after the
last frame write.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from engine.playback_engine import PlaybackEngine
from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class PlaybackShutdownHandler(IShutdownHandler):
    """
    Priority: 120 (runs first, nothing may write after the engine stops)
    """

    def __init__(self, engine: PlaybackEngine, task: Optional[asyncio.Task] = None):
        self.engine = engine
        self.task = task

    @property
    def shutdown_priority(self) -> int:
        return 120

    async def shutdown(self) -> None:
        if self.engine.running:
            log.info("Stopping playback loop...")
        self.engine.stop()

        if self.task is not None and not self.task.done():
            # asyncio.wait does not raise; the task's outcome stays with its owner
            await asyncio.wait({self.task})
        log.debug("Playback loop stopped")
