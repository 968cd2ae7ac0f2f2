# src/devdesk/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "devdesk.log"

# Loggers that only matter in the log file: the 100 ms countdown cadence,
# the alarm worker thread and PortAudio probing.
_QUIET_PREFIXES = ("devdesk.core.ticker", "devdesk.alerts.alarm")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console log lines share stderr with the REPL prompt and the toast lines.

    Own loggers pass, except the quiet ones (WARNING+ only). Everything else,
    asyncio shutdown chatter and captured py.warnings included, needs ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(_QUIET_PREFIXES):
            return record.levelno >= logging.WARNING
        if name == "devdesk" or name.startswith("devdesk."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/devdesk",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route everything to `<log_dir>/devdesk.log` and a filtered copy to stderr.

    Replaces existing root handlers, so calling it twice does not duplicate
    lines. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
