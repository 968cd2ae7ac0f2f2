# src/devdesk/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/alerts/rendering swappable and makes testing easier.
"""

from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Preferences, Task
    from ..timer.timer_models import TimerSession


class Severity(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    ALARM = "alarm"


Clock = Callable[[], float]
# Wall clock in epoch seconds (time.time by default).


class NotificationSink(Protocol):
    """Transient user-visible message (toast). Fire-and-forget."""

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None: ...


class DesktopNotifier(Protocol):
    """
    Optional OS-level notification channel.

    The core only calls show() when permission_granted is True;
    it never blocks waiting for permission.
    """

    @property
    def permission_granted(self) -> bool: ...

    def request_permission(self) -> bool: ...
    def show(self, title: str, body: str) -> None: ...


class AlarmPlayer(Protocol):
    """Audio alarm. Fire-and-forget; implementations must not raise."""

    def play_alarm_tone(self) -> None: ...


class MarkdownRenderer(Protocol):
    def render(self, text: str) -> str: ...


class Ticker(Protocol):
    """
    Periodic callback with at most one active cadence.

    start() cancels any previous cadence before arming the new one.
    """

    @property
    def active(self) -> bool: ...

    def start(self, interval_seconds: float, callback: Callable[[], None]) -> None: ...
    def cancel(self) -> None: ...


class SnapshotRepo(Protocol):
    """Full-collection snapshot persistence (tasks, timer sessions, preferences)."""

    def save_tasks(self, tasks: Iterable[Task]) -> None: ...
    def load_tasks(self) -> list[Task]: ...

    def save_timer_sessions(self, sessions: Iterable[TimerSession]) -> None: ...
    def load_timer_sessions(self) -> list[TimerSession]: ...

    def save_preferences(self, prefs: Preferences) -> None: ...
    def load_preferences(self) -> Preferences: ...
