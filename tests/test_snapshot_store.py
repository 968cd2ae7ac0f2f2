# tests/test_snapshot_store.py

from __future__ import annotations

import sqlite3
from pathlib import Path

from devdesk.storage.snapshot_store import SnapshotStore
from devdesk.tasks.task_models import Category, Preferences, SortMode, Task
from devdesk.timer.timer_models import TimerMode, TimerSession


def _task(task_id: str, **kw) -> Task:
    base = dict(
        id=task_id,
        title=f"task {task_id}",
        content="",
        category=Category.GENERAL,
        created_at=100.0,
        updated_at=100.0,
    )
    base.update(kw)
    return Task(**base)


def test_tasks_round_trip_field_for_field(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path / "s.sqlite3")
    tasks = [
        _task("a", content="**notes**\n- one", category=Category.URGENT),
        _task(
            "b",
            category=Category.CODE_IDEAS,
            due_at=1_700_000_900.5,
            scheduled=True,
            notified=True,
            overdue_notified=True,
            completed=True,
            updated_at=150.25,
        ),
    ]

    store.save_tasks(tasks)
    loaded = SnapshotStore(tmp_path / "s.sqlite3").load_tasks()

    assert loaded == tasks
    assert loaded[0].due_at is None
    assert loaded[0].scheduled is False


def test_missing_keys_yield_empty_collections_and_default_preferences(store: SnapshotStore) -> None:
    assert store.load_tasks() == []
    assert store.load_timer_sessions() == []
    assert store.load_preferences() == Preferences(sort_by=SortMode.DATE, notifications_enabled=True)


def test_save_overwrites_whole_collection(store: SnapshotStore) -> None:
    store.save_tasks([_task("a"), _task("b")])
    store.save_tasks([_task("c")])

    assert [t.id for t in store.load_tasks()] == ["c"]


def test_timer_sessions_round_trip(store: SnapshotStore) -> None:
    sessions = [
        TimerSession(mode=TimerMode.POMODORO, duration_seconds=1500, completed_at=10.0, task_label="Write"),
        TimerSession(mode=TimerMode.CUSTOM, duration_seconds=5, completed_at=20.0, task_label=None),
    ]
    store.save_timer_sessions(sessions)

    assert store.load_timer_sessions() == sessions


def test_preferences_round_trip_and_legacy_key(store: SnapshotStore, tmp_path: Path) -> None:
    store.save_preferences(Preferences(sort_by=SortMode.PRIORITY, notifications_enabled=False))
    assert store.load_preferences() == Preferences(sort_by=SortMode.PRIORITY, notifications_enabled=False)

    # Older snapshots stored the flag as "notifications".
    conn = sqlite3.connect(str(store.db_path))
    try:
        conn.execute(
            "UPDATE snapshots SET value = ? WHERE key = 'settings'",
            ('{"sortBy": "date", "notifications": false}',),
        )
        conn.commit()
    finally:
        conn.close()

    prefs = store.load_preferences()
    assert prefs.sort_by == SortMode.DATE
    assert prefs.notifications_enabled is False


def test_corrupt_snapshot_is_treated_as_absent(store: SnapshotStore) -> None:
    store.save_tasks([_task("a")])

    conn = sqlite3.connect(str(store.db_path))
    try:
        conn.execute("UPDATE snapshots SET value = ? WHERE key = 'tasks'", ("{not json",))
        conn.commit()
    finally:
        conn.close()

    assert store.load_tasks() == []


def test_unknown_category_and_missing_flags_decode_to_defaults() -> None:
    task = Task.from_dict(
        {
            "id": "x",
            "title": "legacy",
            "category": "Someday",
            "createdAt": 1.0,
            "updatedAt": 1.0,
            "dueDateTime": 50.0,
        }
    )

    assert task.category == Category.GENERAL
    assert task.scheduled is True
    assert task.notified is False
    assert task.overdue_notified is False
