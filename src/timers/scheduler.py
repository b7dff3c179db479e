"""Clock capability used by countdown timers.

A scheduler runs a callback once after a delay and hands back a handle
whose ``cancel()`` guarantees the callback will not run. Timers own their
handle; there is no global registry of pending ticks.
"""

import asyncio
from typing import Callable, Optional, Protocol


class CancelHandle(Protocol):
    """Handle for one pending callback."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> CancelHandle: ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    Callbacks run on the loop thread, one at a time, so timers never need
    locks. ``asyncio.TimerHandle.cancel()`` removes a pending callback
    before it can fire.

    Example:
        >>> async def main():
        ...     scheduler = AsyncioScheduler()
        ...     timer = TimerState("t1", "Eggs", 300, scheduler)
        ...     timer.start()
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)
