# src/devdesk/cli/main.py

"""
CLI entrypoint.

Initializes logging, starts the background event loop, builds AppState on it,
arms the due-date monitor, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import asyncio
import logging
import signal

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.runtime import start_background_loop
from ..logging_setup import setup_logging
from ..tasks.due_monitor import run_due_monitor

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    runtime = start_background_loop()
    if runtime is None:
        raise SystemExit("Could not start the background event loop.")

    # Build state on the loop thread: the timer ticker belongs to that loop.
    state = runtime.call(lambda: create_initial_state(settings=settings, loop=runtime.loop))

    # Armed once; runs until shutdown.
    monitor_future = asyncio.run_coroutine_threadsafe(
        run_due_monitor(state.monitor, interval_seconds=settings.due_check_interval_seconds),
        runtime.loop,
    )

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Some platforms may not support SIGTERM.
        pass

    try:
        run_console_loop(state, dispatch=runtime.call)
    finally:
        monitor_future.cancel()
        runtime.stop()
        runtime.join(timeout=5.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
