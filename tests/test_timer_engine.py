# tests/test_timer_engine.py

from __future__ import annotations

import asyncio
import io
import logging
import time

import pytest
from rich.console import Console

from devdesk.alerts.console_sink import TerminalDesktopNotifier
from devdesk.core.ports import Severity
from devdesk.core.ticker import AsyncioTicker
from devdesk.storage.snapshot_store import SnapshotStore
from devdesk.tasks.task_models import Preferences
from devdesk.timer.timer_engine import TimerEngine, progress_band
from devdesk.timer.timer_models import TimerConfig, TimerMode, TimerState

from .fakes import FakeAlarm, FakeClock, FakeDesktop, ManualTicker, RecordingSink


@pytest.fixture()
def engine(
    store: SnapshotStore,
    sink: RecordingSink,
    ticker: ManualTicker,
    clock: FakeClock,
    alarm: FakeAlarm,
    desktop: FakeDesktop,
) -> TimerEngine:
    return TimerEngine(store, sink, ticker=ticker, clock=clock, alarm=alarm, desktop=desktop)


def _run_until_idle(engine: TimerEngine, ticker: ManualTicker, clock: FakeClock, step: float = 0.1) -> None:
    for _ in range(100_000):
        if engine.state != TimerState.RUNNING:
            return
        clock.advance(step)
        ticker.fire()
    raise AssertionError("timer never completed")


def test_initial_state_is_idle_pomodoro(engine: TimerEngine) -> None:
    assert engine.state == TimerState.IDLE
    assert engine.mode == TimerMode.POMODORO
    assert engine.total_duration == 25 * 60
    assert engine.current_duration == 25 * 60
    assert engine.current_session == 1


def test_five_second_countdown_completes_exactly_once(
    engine: TimerEngine,
    ticker: ManualTicker,
    clock: FakeClock,
    alarm: FakeAlarm,
    sink: RecordingSink,
    store: SnapshotStore,
) -> None:
    shown: list[int] = []
    completions = []
    engine.on_display = shown.append
    engine.on_complete = lambda session, message: completions.append((session, message))

    engine.set_custom_duration(0, 0, 5)
    engine.set_mode(TimerMode.CUSTOM)
    engine.set_active_task("t1", "Write report")
    engine.start()
    assert ticker.interval == pytest.approx(0.1)

    _run_until_idle(engine, ticker, clock)

    assert shown[-1] == 0
    assert engine.current_duration == 0
    assert len(completions) == 1
    assert alarm.calls == 1
    assert not ticker.active

    sessions = store.load_timer_sessions()
    assert len(sessions) == 1
    assert sessions[0].mode == TimerMode.CUSTOM
    assert sessions[0].duration_seconds == 5
    assert sessions[0].task_label == "Write report"

    assert sink.messages(Severity.SUCCESS) == ['🚨 Timer Complete! Great work on "Write report"!']
    assert engine.active_task is None

    # Extra ticks after completion are ignored.
    ticker.fire()
    clock.advance(1)
    engine.tick()
    assert len(completions) == 1
    assert len(store.load_timer_sessions()) == 1


def test_remaining_time_follows_the_deadline_not_tick_count(
    engine: TimerEngine, ticker: ManualTicker, clock: FakeClock
) -> None:
    engine.set_custom_duration(0, 1, 0)
    engine.set_mode(TimerMode.CUSTOM)
    engine.start()

    # Only two ticks arrive over 30 seconds (slow scheduling); no drift.
    clock.advance(10)
    ticker.fire()
    assert engine.current_duration == 50
    clock.advance(20)
    ticker.fire()
    assert engine.current_duration == 30


def test_pause_then_start_resumes_from_remaining(
    engine: TimerEngine, ticker: ManualTicker, clock: FakeClock, sink: RecordingSink
) -> None:
    engine.start()
    clock.advance(60)
    ticker.fire()
    assert engine.current_duration == 25 * 60 - 60

    engine.pause()
    assert engine.state == TimerState.PAUSED
    assert not ticker.active
    assert sink.messages(Severity.WARNING) == ["Timer paused"]

    clock.advance(300)
    engine.start()
    clock.advance(0.1)
    ticker.fire()

    assert abs(engine.current_duration - (25 * 60 - 60)) <= 1


def test_double_start_and_double_pause_are_noops(
    engine: TimerEngine, ticker: ManualTicker, sink: RecordingSink
) -> None:
    engine.pause()
    assert engine.state == TimerState.IDLE

    engine.start()
    engine.start()
    assert ticker.starts == 1
    assert sink.messages(Severity.INFO) == ["Timer started! Focus on your task."]

    engine.pause()
    engine.pause()
    assert sink.messages(Severity.WARNING) == ["Timer paused"]


def test_reset_stops_and_restores_duration(engine: TimerEngine, ticker: ManualTicker, clock: FakeClock) -> None:
    engine.start()
    clock.advance(100)
    ticker.fire()

    engine.reset()

    assert engine.state == TimerState.IDLE
    assert not ticker.active
    assert engine.current_duration == 25 * 60


def test_reset_in_custom_mode_rereads_config(engine: TimerEngine) -> None:
    engine.set_mode(TimerMode.CUSTOM)
    assert engine.total_duration == TimerConfig().total_seconds == 3600

    engine.set_custom_duration(0, 2, 30)
    engine.reset()
    assert engine.total_duration == 150
    assert engine.current_duration == 150


def test_mode_change_cancels_running_countdown(engine: TimerEngine, ticker: ManualTicker) -> None:
    engine.start()
    assert ticker.active

    engine.set_mode(TimerMode.DEEP_WORK)

    assert not ticker.active
    assert engine.state == TimerState.IDLE
    assert engine.total_duration == engine.current_duration == 90 * 60


def test_start_after_completion_restarts_full_duration(
    engine: TimerEngine, ticker: ManualTicker, clock: FakeClock
) -> None:
    engine.set_custom_duration(0, 0, 3)
    engine.set_mode(TimerMode.CUSTOM)
    engine.start()
    _run_until_idle(engine, ticker, clock)
    assert engine.current_duration == 0

    engine.start()
    assert engine.current_duration == 3
    assert engine.state == TimerState.RUNNING


def test_pomodoro_sessions_cycle_with_distinct_final_message(
    engine: TimerEngine, ticker: ManualTicker, clock: FakeClock, sink: RecordingSink
) -> None:
    seen = []
    for _ in range(4):
        engine.start()
        clock.advance(25 * 60)
        ticker.fire()
        seen.append(engine.current_session)

    assert seen == [2, 3, 4, 1]

    messages = sink.messages(Severity.SUCCESS)
    assert messages[:3] == ["Session complete! Take a short break."] * 3
    assert messages[3] == "🎉 All sessions complete! Take a longer break."
    assert len(engine.sessions) == 4


def test_completion_survives_alarm_failure(
    store: SnapshotStore, sink: RecordingSink, ticker: ManualTicker, clock: FakeClock
) -> None:
    engine = TimerEngine(store, sink, ticker=ticker, clock=clock, alarm=FakeAlarm(fail=True))
    engine.set_custom_duration(0, 0, 1)
    engine.set_mode(TimerMode.CUSTOM)
    engine.start()
    _run_until_idle(engine, ticker, clock)

    assert engine.state == TimerState.IDLE
    assert len(engine.sessions) == 1


def test_desktop_notification_respects_permission_and_preference(
    store: SnapshotStore, sink: RecordingSink, ticker: ManualTicker, clock: FakeClock
) -> None:
    granted = FakeDesktop(granted=True)
    denied = FakeDesktop(granted=False)
    prefs_off = Preferences(notifications_enabled=False)

    for desktop, prefs in ((granted, None), (denied, None), (FakeDesktop(granted=True), prefs_off)):
        engine = TimerEngine(store, sink, ticker=ticker, clock=clock, desktop=desktop, preferences=prefs)
        engine.set_custom_duration(0, 0, 1)
        engine.set_mode(TimerMode.CUSTOM)
        engine.start()
        _run_until_idle(engine, ticker, clock)

    assert granted.shown == [("DevDesk Timer Complete!", "🚨 Timer Complete! Great work!")]
    assert denied.shown == []


def test_banner_shows_bracketed_task_title_verbatim(
    store: SnapshotStore, sink: RecordingSink, ticker: ManualTicker, clock: FakeClock
) -> None:
    buf = io.StringIO()
    desktop = TerminalDesktopNotifier(console=Console(file=buf, width=100), is_tty=lambda: True)
    desktop.request_permission()
    engine = TimerEngine(store, sink, ticker=ticker, clock=clock, desktop=desktop)

    engine.set_custom_duration(0, 0, 1)
    engine.set_mode(TimerMode.CUSTOM)
    engine.set_active_task("t1", "Fix [/] parser [bold]now")
    engine.start()
    _run_until_idle(engine, ticker, clock)

    out = buf.getvalue()
    assert "DevDesk Timer Complete!" in out
    assert "Fix [/] parser [bold]now" in out


def test_desktop_failure_is_logged_and_completion_continues(
    store: SnapshotStore,
    sink: RecordingSink,
    ticker: ManualTicker,
    clock: FakeClock,
    caplog: pytest.LogCaptureFixture,
) -> None:
    class BrokenDesktop(FakeDesktop):
        def show(self, title: str, body: str) -> None:
            raise RuntimeError("no display")

    completions = []
    engine = TimerEngine(store, sink, ticker=ticker, clock=clock, desktop=BrokenDesktop())
    engine.on_complete = lambda session, message: completions.append(message)
    engine.set_custom_duration(0, 0, 1)
    engine.set_mode(TimerMode.CUSTOM)

    with caplog.at_level(logging.DEBUG, logger="devdesk.timer.timer_engine"):
        engine.start()
        _run_until_idle(engine, ticker, clock)

    assert completions == ["🚨 Timer Complete! Great work!"]
    assert "Desktop notification failed." in caplog.text


def test_quick_timer_for_task_starts_custom_countdown(engine: TimerEngine, ticker: ManualTicker) -> None:
    engine.set_timer_for_task(90)

    assert engine.mode == TimerMode.CUSTOM
    assert engine.custom_config == TimerConfig(hours=1, minutes=30, seconds=0)
    assert engine.total_duration == 90 * 60
    assert engine.state == TimerState.RUNNING
    assert ticker.active


def test_progress_fraction_and_band(engine: TimerEngine, ticker: ManualTicker, clock: FakeClock) -> None:
    fractions: list[float] = []
    engine.on_progress = fractions.append

    engine.set_custom_duration(0, 0, 100)
    engine.set_mode(TimerMode.CUSTOM)
    engine.start()
    clock.advance(60)
    ticker.fire()

    assert fractions[-1] == pytest.approx(0.6)
    assert progress_band(0.0) == "green"
    assert progress_band(0.3) == "blue"
    assert progress_band(0.6) == "amber"
    assert progress_band(0.9) == "red"


def test_sessions_are_loaded_from_store(
    store: SnapshotStore, sink: RecordingSink, ticker: ManualTicker, clock: FakeClock
) -> None:
    first = TimerEngine(store, sink, ticker=ticker, clock=clock)
    first.set_custom_duration(0, 0, 1)
    first.set_mode(TimerMode.CUSTOM)
    first.start()
    _run_until_idle(first, ticker, clock)

    second = TimerEngine(store, sink, ticker=ManualTicker(), clock=clock)
    assert len(second.sessions) == 1


@pytest.mark.asyncio
async def test_asyncio_ticker_rearm_keeps_a_single_cadence() -> None:
    ticker = AsyncioTicker()
    hits = {"a": 0, "b": 0}

    ticker.start(0.01, lambda: hits.__setitem__("a", hits["a"] + 1))
    ticker.start(0.01, lambda: hits.__setitem__("b", hits["b"] + 1))
    await asyncio.sleep(0.1)
    ticker.cancel()
    assert not ticker.active

    assert hits["a"] == 0
    assert hits["b"] > 0

    frozen = hits["b"]
    await asyncio.sleep(0.05)
    assert hits["b"] == frozen


@pytest.mark.asyncio
async def test_engine_on_real_loop_completes_once(store: SnapshotStore, sink: RecordingSink) -> None:
    alarm = FakeAlarm()
    engine = TimerEngine(store, sink, ticker=AsyncioTicker(), alarm=alarm, tick_seconds=0.01)
    engine.set_custom_duration(0, 0, 1)
    engine.set_mode(TimerMode.CUSTOM)
    engine.start()

    deadline = time.monotonic() + 5.0
    while engine.state == TimerState.RUNNING and time.monotonic() < deadline:
        await asyncio.sleep(0.02)

    assert engine.state == TimerState.IDLE
    assert engine.current_duration == 0
    assert alarm.calls == 1
    assert len(store.load_timer_sessions()) == 1
