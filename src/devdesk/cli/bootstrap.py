# src/devdesk/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (store, alerts, ticker) into AppState.
"""

from __future__ import annotations

import asyncio
import logging
import time

from ..alerts.alarm import ToneAlarm
from ..alerts.console_sink import ConsoleNotificationSink, TerminalDesktopNotifier
from ..alerts.markdown import RichMarkdownRenderer
from ..config import get_settings
from ..core.ports import AlarmPlayer, Clock, DesktopNotifier, NotificationSink, Ticker
from ..core.state import AppState
from ..core.ticker import AsyncioTicker
from ..storage.snapshot_store import SnapshotStore
from ..tasks.due_monitor import DueDateMonitor
from ..tasks.task_repository import TaskRepository
from ..timer.timer_engine import TimerEngine
from ..timer.timer_models import TimerPresets

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    loop: asyncio.AbstractEventLoop | None = None,
    sink: NotificationSink | None = None,
    ticker: Ticker | None = None,
    alarm: AlarmPlayer | None = None,
    desktop: DesktopNotifier | None = None,
    clock: Clock = time.time,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and collaborators injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to
    get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = SnapshotStore(settings.store_path)
    preferences = store.load_preferences()

    if sink is None:
        sink = ConsoleNotificationSink()
    if ticker is None:
        ticker = AsyncioTicker(loop)
    if alarm is None:
        alarm = ToneAlarm(enabled=settings.alarm_enabled)
    if desktop is None:
        desktop = TerminalDesktopNotifier(enabled=settings.desktop_notifications)
        desktop.request_permission()

    tasks = TaskRepository(store, clock=clock, sort_mode=preferences.sort_by)
    monitor = DueDateMonitor(tasks, sink, clock=clock, due_soon_minutes=settings.due_soon_minutes)
    timer = TimerEngine(
        store,
        sink,
        ticker=ticker,
        clock=clock,
        alarm=alarm,
        desktop=desktop,
        preferences=preferences,
        presets=TimerPresets(
            pomodoro_minutes=settings.pomodoro_minutes,
            deep_work_minutes=settings.deep_work_minutes,
        ),
        total_sessions=settings.pomodoro_sessions,
        tick_seconds=settings.timer_tick_ms / 1000.0,
    )

    logger.info(
        "State ready tasks=%d sessions=%d sort=%s",
        len(tasks),
        len(timer.sessions),
        preferences.sort_by.value,
    )

    return AppState(
        settings=settings,
        store=store,
        preferences=preferences,
        sink=sink,
        tasks=tasks,
        monitor=monitor,
        timer=timer,
        renderer=RichMarkdownRenderer(),
        desktop=desktop,
    )
