"""
Lifecycle subsystem
-------------------

Exports the public API for:
- scoped terminal modes
- graceful shutdown
- shutdown handlers

External code should import from:
    from lifecycle import ShutdownCoordinator, TerminalSession
    from lifecycle.handlers import PlaybackShutdownHandler
"""

from .shutdown_coordinator import ShutdownCoordinator
from .shutdown_protocol import IShutdownHandler
from .terminal_session import TerminalSession
from . import handlers

__all__ = [
    "ShutdownCoordinator",
    "IShutdownHandler",
    "TerminalSession",
    "handlers",
]
