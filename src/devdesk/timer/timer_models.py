# src/devdesk/timer/timer_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TimerMode(StrEnum):
    POMODORO = "pomodoro"
    DEEP_WORK = "deep-work"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @classmethod
    def from_raw(cls, raw: str | None) -> TimerMode:
        if not raw:
            return cls.CUSTOM
        s = str(raw).strip().lower().replace("_", "-")
        if s in ("deepwork", "deep"):
            s = cls.DEEP_WORK.value
        try:
            return cls(s)
        except ValueError:
            return cls.CUSTOM


_MODE_LABELS = {
    TimerMode.POMODORO: "Pomodoro",
    TimerMode.DEEP_WORK: "Deep Work",
    TimerMode.CUSTOM: "Custom",
}


class TimerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class TimerConfig:
    """Custom-mode duration as entered by the user."""

    hours: int = 1
    minutes: int = 0
    seconds: int = 0

    @property
    def total_seconds(self) -> int:
        return max(0, int(self.hours)) * 3600 + max(0, int(self.minutes)) * 60 + max(0, int(self.seconds))

    @classmethod
    def from_minutes(cls, minutes: int) -> TimerConfig:
        minutes = max(0, int(minutes))
        return cls(hours=minutes // 60, minutes=minutes % 60, seconds=0)


@dataclass(frozen=True, slots=True)
class TimerPresets:
    pomodoro_minutes: int = 25
    deep_work_minutes: int = 90

    def seconds_for(self, mode: TimerMode) -> int | None:
        if mode == TimerMode.POMODORO:
            return self.pomodoro_minutes * 60
        if mode == TimerMode.DEEP_WORK:
            return self.deep_work_minutes * 60
        return None


@dataclass(frozen=True, slots=True)
class TimerSession:
    """One completed countdown. `task_label` is a snapshot of the task title."""

    mode: TimerMode
    duration_seconds: int
    completed_at: float
    task_label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "duration": self.duration_seconds,
            "completedAt": self.completed_at,
            "task": self.task_label,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimerSession:
        label = data.get("task")
        return cls(
            mode=TimerMode.from_raw(data.get("mode")),
            duration_seconds=int(data.get("duration") or 0),
            completed_at=float(data.get("completedAt") or 0.0),
            task_label=str(label) if label is not None else None,
        )
