# src/devdesk/tasks/due_monitor.py

from __future__ import annotations

"""
Due-date monitor.

A small polling loop that:
- scans every task with a due date,
- fires one "due soon" alert per due date value (re-armed by any task edit),
- fires one "overdue" alert per task,
- persists the notified flags through the repository.

Presentation of the alerts belongs to the notification sink, not the monitor.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum

from ..core.ports import Clock, NotificationSink, Severity
from ..core.timeutil import round_half_up
from .task_models import Task
from .task_repository import TaskRepository

logger = logging.getLogger(__name__)


class AlertKind(str, Enum):
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"


@dataclass(slots=True, frozen=True)
class DueAlert:
    task_id: str
    kind: AlertKind
    message: str
    minutes: int | None = None


def due_soon_message(task: Task, minutes: int) -> str:
    return f'🔔 Task "{task.title}" is due in {minutes} minutes!'


def overdue_message(task: Task) -> str:
    return f'⚠️ Task "{task.title}" is overdue!'


class DueDateMonitor:
    def __init__(
        self,
        repo: TaskRepository,
        sink: NotificationSink,
        *,
        clock: Clock = time.time,
        due_soon_minutes: float = 15.0,
    ) -> None:
        self._repo = repo
        self._sink = sink
        self._clock = clock
        self._window_minutes = float(due_soon_minutes)

    def check(self, now: float | None = None) -> list[DueAlert]:
        """
        Run one scan and return the alerts that were emitted.

        The two checks are independent: a task can be overdue without ever
        having produced a due-soon alert (e.g. created with a past due date).
        """
        if now is None:
            now = self._clock()

        alerts: list[DueAlert] = []

        for task in self._repo.tasks:
            if task.due_at is None or task.completed:
                continue

            minutes_until_due = (task.due_at - now) / 60.0

            if not task.notified and 0 < minutes_until_due <= self._window_minutes:
                minutes = round_half_up(minutes_until_due)
                alert = DueAlert(
                    task_id=task.id,
                    kind=AlertKind.DUE_SOON,
                    message=due_soon_message(task, minutes),
                    minutes=minutes,
                )
                self._sink.notify(alert.message, Severity.ALARM)
                self._repo.mark_due_soon_notified(task.id)
                alerts.append(alert)
                logger.info("Due-soon alert task_id=%s minutes=%s", task.id, minutes)

            if not task.overdue_notified and now > task.due_at:
                alert = DueAlert(task_id=task.id, kind=AlertKind.OVERDUE, message=overdue_message(task))
                self._sink.notify(alert.message, Severity.ERROR)
                self._repo.mark_overdue_notified(task.id)
                alerts.append(alert)
                logger.info("Overdue alert task_id=%s", task.id)

        return alerts


async def run_due_monitor(
        monitor: DueDateMonitor,
        *,
        interval_seconds: float = 60.0,
) -> None:
    """
    Simple polling loop.

    Checks once immediately, then every interval_seconds. A failing check is
    logged and the loop keeps going.

    To stop the monitor, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        try:
            monitor.check()
        except Exception:
            logger.exception("Due-date check failed")

        await asyncio.sleep(sleep_s)
