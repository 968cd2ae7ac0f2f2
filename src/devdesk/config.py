# src/devdesk/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "DEVDESK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_path: Path

    # ---- Due-date monitor ----
    due_check_interval_seconds: int
    due_soon_minutes: int
    due_highlight_minutes: int

    # ---- Timer ----
    timer_tick_ms: int
    pomodoro_minutes: int
    deep_work_minutes: int
    pomodoro_sessions: int

    # ---- Alerts ----
    alarm_enabled: bool
    desktop_notifications: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "devdesk") or "devdesk"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/devdesk"))
        store_path = _env_path(_k("STORE_PATH"), data_dir / "devdesk.sqlite3")

        due_check_interval_seconds = max(1, _env_int(_k("DUE_CHECK_INTERVAL_SECONDS"), 60))
        due_soon_minutes = max(1, _env_int(_k("DUE_SOON_MINUTES"), 15))
        due_highlight_minutes = max(1, _env_int(_k("DUE_HIGHLIGHT_MINUTES"), 30))

        timer_tick_ms = max(10, _env_int(_k("TIMER_TICK_MS"), 100))
        pomodoro_minutes = max(1, _env_int(_k("POMODORO_MINUTES"), 25))
        deep_work_minutes = max(1, _env_int(_k("DEEP_WORK_MINUTES"), 90))
        pomodoro_sessions = max(1, _env_int(_k("POMODORO_SESSIONS"), 4))

        alarm_enabled = _env_bool(_k("ALARM_ENABLED"), True)
        desktop_notifications = _env_bool(_k("DESKTOP_NOTIFICATIONS"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_path=store_path,
            due_check_interval_seconds=due_check_interval_seconds,
            due_soon_minutes=due_soon_minutes,
            due_highlight_minutes=due_highlight_minutes,
            timer_tick_ms=timer_tick_ms,
            pomodoro_minutes=pomodoro_minutes,
            deep_work_minutes=deep_work_minutes,
            pomodoro_sessions=pomodoro_sessions,
            alarm_enabled=alarm_enabled,
            desktop_notifications=desktop_notifications,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
