# src/devdesk/core/ticker.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class AsyncioTicker:
    """
    Periodic callback on an asyncio loop (like setInterval).

    At most one cadence is active: start() cancels the previous one first.
    The callback runs on the loop thread; the first call happens one interval
    after start(). An exception in the callback is logged and the cadence keeps
    running.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._task: asyncio.Task[None] | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, interval_seconds: float, callback: Callable[[], None]) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._task = loop.create_task(self._run(max(0.001, float(interval_seconds)), callback))

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self, interval_seconds: float, callback: Callable[[], None]) -> None:
        me = asyncio.current_task()
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                callback()
            except Exception:
                logger.exception("Ticker callback failed")
            # The callback may have cancelled or re-armed this ticker.
            if self._task is not me:
                return
