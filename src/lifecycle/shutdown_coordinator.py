"""
Shutdown coordinator that orchestrates graceful shutdown of the player.

Installs signal handlers, waits for either the playback task to finish or
a signal, then runs shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import Dict, List, Optional
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(PlaybackShutdownHandler(engine, play_task))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown(play_task)
        await coordinator.shutdown_all()
    """

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        """
        Args:
            timeout_per_handler: Timeout for each individual handler (seconds)
            total_timeout: Total timeout for entire shutdown sequence (seconds)
        """
        self._handlers: List = []
        self._shutdown_event = asyncio.Event()
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self._shutdown_trigger: Dict[str, Optional[str]] = {"reason": None}
        self._signals: List[signal.Signals] = []

    @property
    def reason(self) -> Optional[str]:
        return self._shutdown_trigger["reason"]

    def register(self, handler) -> None:
        """
        Register a shutdown handler.

        Handler must have:
        - shutdown_priority property (int)
        - async shutdown() method
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def trigger(self, reason: str) -> None:
        """Request shutdown (signal handler or programmatic)."""
        if self._shutdown_trigger["reason"] is None:
            self._shutdown_trigger["reason"] = reason
        self._shutdown_event.set()

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """
        Install SIGINT (Ctrl+C) and SIGTERM handlers on the running loop.

        Platforms without loop signal support keep the default handlers
        (KeyboardInterrupt still reaches the terminal session cleanup).
        """
        def signal_handler(sig: signal.Signals) -> None:
            log.info(f"Signal {sig.name} received → triggering shutdown")
            self.trigger(sig.name)

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))
                self._signals.append(sig)
            except (NotImplementedError, RuntimeError):
                log.debug(f"Signal handler for {sig.name} not supported on this platform")

        log.debug("Signal handlers installed", signals=[s.name for s in self._signals])

    def remove_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in self._signals:
            loop.remove_signal_handler(sig)
        self._signals.clear()

    async def wait_for_shutdown(self, watched: Optional[asyncio.Task] = None) -> None:
        """
        Return when shutdown was triggered or the watched task completed.

        A watched task that completes (cleanly or not) counts as a trigger;
        its result or exception stays on the task for the caller.
        """
        waiter = asyncio.ensure_future(self._shutdown_event.wait())
        wait_set = {waiter}
        if watched is not None:
            wait_set.add(watched)

        try:
            done, _ = await asyncio.wait(wait_set, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if not waiter.done():
                waiter.cancel()

        if watched is not None and watched in done:
            if watched.cancelled():
                self.trigger("Task cancelled")
            elif watched.exception() is not None:
                self.trigger(f"Task failure: {watched.exception()!r}")
            else:
                self.trigger("Playback complete")

    async def shutdown_all(self) -> None:
        """
        Execute shutdown of all handlers in priority order (highest first).

        A failing or slow handler is logged and skipped; the rest still run.
        """
        log.debug("Initiating shutdown sequence", reason=self.reason or "UNKNOWN")

        sorted_handlers = sorted(
            self._handlers, key=lambda h: h.shutdown_priority, reverse=True
        )

        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in sorted_handlers:
            handler_name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(
                    f"Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)"
                )
                break

            try:
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"✓ {handler_name} shutdown complete")

            except asyncio.TimeoutError:
                log.error(f"{handler_name} shutdown timeout ({self._timeout_per_handler}s)")

            except asyncio.CancelledError:
                log.debug(f"{handler_name} shutdown was cancelled")
                raise

            except Exception as e:
                log.error(f"Error shutting down {handler_name}: {e}", error_type=type(e).__name__)

        log.debug("Shutdown sequence complete")

