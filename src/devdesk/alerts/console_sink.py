# src/devdesk/alerts/console_sink.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..core.ports import Severity

logger = logging.getLogger(__name__)

_STYLES = {
    Severity.INFO: "blue",
    Severity.SUCCESS: "green",
    Severity.WARNING: "yellow",
    Severity.ERROR: "bold red",
    Severity.ALARM: "bold dark_orange",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleNotificationSink:
    """Prints each notification as one timestamped, colour-tagged line."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(highlight=False)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        sev = Severity(severity)
        logger.debug("notify severity=%s message=%s", sev.value, message)
        style = _STYLES.get(sev, "blue")
        self._console.print(f"[{_ts_local()}] [{sev.value.upper()}] {message}", style=style, markup=False)


class TerminalDesktopNotifier:
    """
    OS-level channel stand-in for a terminal session.

    "Permission" is granted when enabled by config and stdout is a TTY;
    show() draws a panel and rings the terminal bell.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        console: Console | None = None,
        is_tty: Callable[[], bool] | None = None,
    ) -> None:
        self._enabled = bool(enabled)
        self._console = console or Console(highlight=False)
        self._is_tty = is_tty or sys.stdout.isatty
        self._granted = False

    @property
    def permission_granted(self) -> bool:
        return self._granted

    def request_permission(self) -> bool:
        try:
            self._granted = self._enabled and bool(self._is_tty())
        except Exception:
            self._granted = False
        logger.info("Desktop notifications permission=%s", self._granted)
        return self._granted

    def show(self, title: str, body: str) -> None:
        if not self._granted:
            return
        self._console.bell()
        # User-typed task titles end up in both strings; never parse them as markup.
        self._console.print(Panel(Text(body), title=Text(title), border_style="magenta"))
