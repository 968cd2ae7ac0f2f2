# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from devdesk.cli.bootstrap import create_initial_state
from devdesk.core.state import AppState
from devdesk.storage.snapshot_store import SnapshotStore
from devdesk.tasks.task_repository import TaskRepository

from .fakes import FakeAlarm, FakeClock, FakeDesktop, ManualTicker, RecordingSink


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="devdesk-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        store_path=tmp_path / "devdesk.sqlite3",
        due_check_interval_seconds=60,
        due_soon_minutes=15,
        due_highlight_minutes=30,
        timer_tick_ms=100,
        pomodoro_minutes=25,
        deep_work_minutes=90,
        pomodoro_sessions=4,
        alarm_enabled=False,
        desktop_notifications=False,
    )


@pytest.fixture()
def store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(tmp_path / "store.sqlite3")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture()
def alarm() -> FakeAlarm:
    return FakeAlarm()


@pytest.fixture()
def desktop() -> FakeDesktop:
    return FakeDesktop()


@pytest.fixture()
def repo(store: SnapshotStore, clock: FakeClock) -> TaskRepository:
    return TaskRepository(store, clock=clock)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    sink: RecordingSink,
    ticker: ManualTicker,
    alarm: FakeAlarm,
    desktop: FakeDesktop,
    clock: FakeClock,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: the SQLite snapshot store is real, because its correctness is part
    of what we want to test.
    """
    return create_initial_state(
        settings=settings,
        sink=sink,
        ticker=ticker,
        alarm=alarm,
        desktop=desktop,
        clock=clock,
    )
