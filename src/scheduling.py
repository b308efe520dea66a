"""
Cancellable delayed callbacks for the playback animation.

The app runs on NiceGUI's asyncio loop, so a scheduled tick is simply an
asyncio.Task that sleeps and then fires. The returned handle is the task
itself; calling cancel() on it before it fires drops the callback.
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TickHandle(Protocol):
    def cancel(self) -> bool: ...


class Scheduler(Protocol):
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TickHandle: ...


class AsyncioScheduler:
    """Schedules callbacks as asyncio tasks on the running (or given) event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.Task:
        async def fire():
            await asyncio.sleep(max(0, delay_ms) / 1000)
            try:
                callback()
            except Exception as e:
                logger.error(f"Error in scheduled tick: {e}")

        loop = self._loop or asyncio.get_running_loop()
        return loop.create_task(fire())
