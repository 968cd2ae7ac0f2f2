# src/devdesk/storage/snapshot_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..tasks.task_models import Preferences, Task
from ..timer.timer_models import TimerSession

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
TIMER_SESSIONS_KEY = "timerSessions"
SETTINGS_KEY = "settings"


class SnapshotStore:
    """
    SQLite key-value store of JSON snapshots.

    Three independent collections live under fixed keys (tasks, timerSessions,
    settings). Every save overwrites its whole collection; there are no partial
    updates and no versioning of the stored shape.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "devdesk.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SnapshotStore ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS snapshots (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _put(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO snapshots(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, payload, time.time()),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Snapshot saved key=%s bytes=%d", key, len(payload))

    def _get(self, key: str) -> Any | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM snapshots WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except (TypeError, ValueError):
            logger.exception("Snapshot key=%s is not valid JSON; treating as absent.", key)
            return None

    def _get_list(self, key: str) -> list[dict[str, Any]]:
        raw = self._get(key)
        if not isinstance(raw, list):
            return []
        return [item for item in raw if isinstance(item, dict)]

    # ---- public API ----

    def save_tasks(self, tasks: Iterable[Task]) -> None:
        self._put(TASKS_KEY, [t.to_dict() for t in tasks])

    def load_tasks(self) -> list[Task]:
        out: list[Task] = []
        for item in self._get_list(TASKS_KEY):
            if "id" not in item:
                logger.warning("Skipping stored task without id: %r", item)
                continue
            out.append(Task.from_dict(item))
        return out

    def save_timer_sessions(self, sessions: Iterable[TimerSession]) -> None:
        self._put(TIMER_SESSIONS_KEY, [s.to_dict() for s in sessions])

    def load_timer_sessions(self) -> list[TimerSession]:
        return [TimerSession.from_dict(item) for item in self._get_list(TIMER_SESSIONS_KEY)]

    def save_preferences(self, prefs: Preferences) -> None:
        self._put(SETTINGS_KEY, prefs.to_dict())

    def load_preferences(self) -> Preferences:
        raw = self._get(SETTINGS_KEY)
        if not isinstance(raw, dict):
            return Preferences()
        return Preferences.from_dict(raw)
