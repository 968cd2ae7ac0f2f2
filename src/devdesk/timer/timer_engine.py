# src/devdesk/timer/timer_engine.py

from __future__ import annotations

"""
Focus timer.

A single countdown with three states (idle / running / paused). Remaining time
is always derived from an absolute deadline and the wall clock, so scheduling
jitter of the tick callback never accumulates into drift.

Side effects on completion (session log, alarm, notifications) go through
injected ports; the engine owns no UI.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..core.ports import AlarmPlayer, Clock, DesktopNotifier, NotificationSink, Severity, SnapshotRepo, Ticker
from ..core.timeutil import round_half_up
from ..tasks.task_models import Preferences
from .timer_models import TimerConfig, TimerMode, TimerPresets, TimerSession, TimerState

logger = logging.getLogger(__name__)

DESKTOP_TITLE = "DevDesk Timer Complete!"

DisplayCallback = Callable[[int], None]
ProgressCallback = Callable[[float], None]
CompleteCallback = Callable[[TimerSession, str], None]


@dataclass(frozen=True, slots=True)
class ActiveTask:
    """Label of the task being worked on. Not a reference: the task may be gone."""

    task_id: str
    title: str


def progress_band(fraction: float) -> str:
    """Colour band of the progress bar (green -> blue -> amber -> red)."""
    pct = fraction * 100.0
    if pct < 25:
        return "green"
    if pct < 50:
        return "blue"
    if pct < 75:
        return "amber"
    return "red"


class TimerEngine:
    def __init__(
        self,
        store: SnapshotRepo,
        sink: NotificationSink,
        *,
        ticker: Ticker,
        clock: Clock = time.time,
        alarm: AlarmPlayer | None = None,
        desktop: DesktopNotifier | None = None,
        preferences: Preferences | None = None,
        presets: TimerPresets | None = None,
        custom: TimerConfig | None = None,
        total_sessions: int = 4,
        tick_seconds: float = 0.1,
        on_display: DisplayCallback | None = None,
        on_progress: ProgressCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> None:
        self._store = store
        self._sink = sink
        self._ticker = ticker
        self._clock = clock
        self._alarm = alarm
        self._desktop = desktop
        self._preferences = preferences or Preferences()
        self._presets = presets or TimerPresets()
        self._custom = custom or TimerConfig()
        self._tick_seconds = max(0.001, float(tick_seconds))

        self.on_display = on_display
        self.on_progress = on_progress
        self.on_complete = on_complete

        self._state = TimerState.IDLE
        self._mode = TimerMode.POMODORO
        self._total = 0
        self._current = 0
        self._deadline: float | None = None

        self._total_sessions = max(1, int(total_sessions))
        self._current_session = 1
        self._active: ActiveTask | None = None

        self._sessions: list[TimerSession] = store.load_timer_sessions()

        self.set_mode(TimerMode.POMODORO)

    # ---- read-only view ----

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def total_duration(self) -> int:
        return self._total

    @property
    def current_duration(self) -> int:
        return self._current

    @property
    def custom_config(self) -> TimerConfig:
        return self._custom

    @property
    def current_session(self) -> int:
        return self._current_session

    @property
    def total_sessions(self) -> int:
        return self._total_sessions

    @property
    def active_task(self) -> ActiveTask | None:
        return self._active

    @property
    def sessions(self) -> list[TimerSession]:
        return list(self._sessions)

    @property
    def progress(self) -> float:
        if self._total <= 0:
            return 0.0
        return (self._total - self._current) / self._total

    # ---- configuration ----

    def set_mode(self, mode: TimerMode | str) -> None:
        self._mode = TimerMode.from_raw(mode)
        self._ticker.cancel()
        self._state = TimerState.IDLE
        self._deadline = None

        preset = self._presets.seconds_for(self._mode)
        self._total = self._custom.total_seconds if preset is None else preset
        self._current = self._total
        self._refresh()
        logger.debug("Timer mode=%s total=%s", self._mode.value, self._total)

    def set_custom_duration(self, hours: int = 0, minutes: int = 0, seconds: int = 0) -> None:
        self._custom = TimerConfig(hours=max(0, int(hours)), minutes=max(0, int(minutes)), seconds=max(0, int(seconds)))
        if self._mode == TimerMode.CUSTOM and self._state != TimerState.RUNNING:
            self._total = self._custom.total_seconds
            self._current = self._total
            self._refresh()

    def set_timer_for_task(self, minutes: int) -> None:
        """Quick timer: custom countdown of `minutes`, started immediately."""
        self.set_mode(TimerMode.CUSTOM)
        cfg = TimerConfig.from_minutes(minutes)
        self.set_custom_duration(cfg.hours, cfg.minutes, cfg.seconds)
        self.start()

    def set_active_task(self, task_id: str, title: str) -> None:
        self._active = ActiveTask(task_id=str(task_id), title=str(title))

    def clear_active_task(self) -> None:
        self._active = None

    # ---- transitions ----

    def start(self) -> None:
        if self._state == TimerState.RUNNING:
            return
        if self._current <= 0:
            self._current = self._total

        self._state = TimerState.RUNNING
        self._deadline = self._clock() + self._current
        self._ticker.start(self._tick_seconds, self.tick)

        logger.info("Timer started mode=%s remaining=%s", self._mode.value, self._current)
        self._sink.notify("Timer started! Focus on your task.", Severity.INFO)

    def pause(self) -> None:
        if self._state != TimerState.RUNNING:
            return
        self._ticker.cancel()
        self._state = TimerState.PAUSED
        self._deadline = None

        logger.info("Timer paused remaining=%s", self._current)
        self._sink.notify("Timer paused", Severity.WARNING)

    def reset(self) -> None:
        self._ticker.cancel()
        self._state = TimerState.IDLE
        self._deadline = None

        if self._mode == TimerMode.CUSTOM:
            self._total = self._custom.total_seconds
        self._current = self._total
        self._refresh()

    def tick(self) -> None:
        """One recomputation of the remaining time; called by the ticker."""
        if self._state != TimerState.RUNNING or self._deadline is None:
            return

        remaining = max(0, round_half_up(self._deadline - self._clock()))
        self._current = remaining
        self._refresh()

        if remaining <= 0:
            self._complete()

    # ---- internals ----

    def _refresh(self) -> None:
        if self.on_display is not None:
            self.on_display(self._current)
        if self.on_progress is not None:
            self.on_progress(self.progress)

    def _complete(self) -> None:
        self._ticker.cancel()
        self._state = TimerState.IDLE
        self._deadline = None

        label = self._active.title if self._active else None
        session = TimerSession(
            mode=self._mode,
            duration_seconds=self._total,
            completed_at=self._clock(),
            task_label=label,
        )
        self._sessions.append(session)
        self._store.save_timer_sessions(self._sessions)
        logger.info("Timer complete mode=%s duration=%s task=%s", session.mode.value, session.duration_seconds, label)

        self._play_alarm()

        if label:
            message = f'🚨 Timer Complete! Great work on "{label}"!'
        else:
            message = "🚨 Timer Complete! Great work!"

        if self._mode == TimerMode.POMODORO:
            self._current_session += 1
            if self._current_session > self._total_sessions:
                self._current_session = 1
                message = "🎉 All sessions complete! Take a longer break."
            else:
                message = "Session complete! Take a short break."

        self._sink.notify(message, Severity.SUCCESS)
        self._show_desktop(message)

        self._active = None

        if self.on_complete is not None:
            self.on_complete(session, message)

    def _play_alarm(self) -> None:
        if self._alarm is None:
            return
        try:
            self._alarm.play_alarm_tone()
        except Exception:
            logger.debug("Alarm tone failed.", exc_info=True)

    def _show_desktop(self, message: str) -> None:
        desktop = self._desktop
        if desktop is None or not self._preferences.notifications_enabled:
            return
        try:
            if not desktop.permission_granted:
                return
            desktop.show(DESKTOP_TITLE, message)
        except Exception:
            logger.debug("Desktop notification failed.", exc_info=True)
