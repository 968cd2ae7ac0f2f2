# src/devdesk/core/runtime.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BackgroundLoop:
    """
    An asyncio loop running in a daemon thread.

    All core state (tasks, timer, monitor) lives on this loop. Other threads
    (the blocking console REPL) hand work over with call(), so mutations never
    interleave with timer ticks or due-date checks.
    """

    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def call(self, fn: Callable[[], T], timeout: float | None = 30.0) -> T:
        """Run fn on the loop thread and wait for its result (exceptions re-raise here)."""

        async def _run() -> T:
            return fn()

        fut = asyncio.run_coroutine_threadsafe(_run(), self.loop)
        return fut.result(timeout=timeout)

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal loop stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


async def _idle_until(stop_event: asyncio.Event) -> None:
    await stop_event.wait()
    # Cancel whatever is still scheduled (monitor loop, timer ticks).
    current = asyncio.current_task()
    pending = [t for t in asyncio.all_tasks() if t is not current]
    for t in pending:
        t.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


def start_background_loop(name: str = "devdesk-loop") -> BackgroundLoop | None:
    """
    Start an asyncio loop in a background thread (so the console REPL can block on input()).
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_idle_until(stop_event))
        finally:
            with contextlib.suppress(Exception):
                loop.stop()
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name=name, daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Background loop thread did not initialize properly.")
        return None

    logger.info("Background loop started.")
    return BackgroundLoop(thread=t, loop=loop, stop_event=stop_event)
