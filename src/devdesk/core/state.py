# src/devdesk/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..storage.snapshot_store import SnapshotStore
from ..tasks.due_monitor import DueDateMonitor
from ..tasks.task_models import Preferences
from ..tasks.task_repository import TaskRepository
from ..timer.timer_engine import TimerEngine
from .ports import DesktopNotifier, MarkdownRenderer, NotificationSink


@dataclass
class AppState:
    """
    Everything one session needs, built once in the composition root.

    No module-level singletons: tests construct as many independent states as
    they like.
    """

    settings: Any
    store: SnapshotStore
    preferences: Preferences
    sink: NotificationSink
    tasks: TaskRepository
    monitor: DueDateMonitor
    timer: TimerEngine
    renderer: MarkdownRenderer | None = None
    desktop: DesktopNotifier | None = None

    def save_preferences(self) -> None:
        self.store.save_preferences(self.preferences)
