"""
AI auto-play: keep asking the engine to advance an AI-vs-AI game at a fixed cadence.

The loop runs as one asyncio task. Starting it while it runs hands back the running handle,
so there is never more than one polling chain per loop.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from chessboard_client.core.config import DEFAULT_AUTO_PLAY_INTERVAL_S
from chessboard_client.core.exceptions import ChessClientError

logger = logging.getLogger(__name__)

Tick = Callable[[], Awaitable[None]]


class AutoPlayHandle:
    """Returned by AutoPlayLoop.start(). Cancelling it stops the loop before its next request."""

    def __init__(self) -> None:
        self.cancelled = False
        self.task: Optional[asyncio.Task[None]] = None

    @property
    def active(self) -> bool:
        return not self.cancelled and self.task is not None and not self.task.done()

    def cancel(self) -> None:
        self.cancelled = True
        if self.task is not None:
            self.task.cancel()


class AutoPlayLoop:
    def __init__(self, tick: Tick, interval: float = DEFAULT_AUTO_PLAY_INTERVAL_S) -> None:
        self._tick = tick
        self.interval = interval
        self._handle: Optional[AutoPlayHandle] = None
        self.iterations = 0

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self) -> AutoPlayHandle:
        """Start ticking. Must be called from within a running event loop."""
        if self._handle is not None and self._handle.active:
            return self._handle
        handle = AutoPlayHandle()
        handle.task = asyncio.get_running_loop().create_task(self._run(handle))
        self._handle = handle
        logger.info("Auto-play started (every %.3fs)", self.interval)
        return handle

    def stop(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        logger.info("Auto-play stopped after %d iterations", self.iterations)

    async def aclose(self) -> None:
        """Stop, and wait until the cancelled loop task has actually finished."""
        handle = self._handle
        self.stop()
        if handle is not None and handle.task is not None:
            await asyncio.gather(handle.task, return_exceptions=True)

    async def _run(self, handle: AutoPlayHandle) -> None:
        while not handle.cancelled:
            self.iterations += 1
            try:
                await self._tick()
            except ChessClientError as error:
                logger.warning("Auto-play iteration %d failed: %s", self.iterations, error)
            # Cancellation may have been requested while the tick's request was pending
            if handle.cancelled:
                break
            await asyncio.sleep(self.interval)
