# src/devdesk/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Category(StrEnum):
    """Task category; doubles as the priority used by the priority sort."""

    URGENT = "Urgent"
    FREELANCING = "Freelancing"
    CODE_IDEAS = "Code Ideas"
    GENERAL = "General"

    @property
    def rank(self) -> int:
        return _CATEGORY_RANK[self]

    @classmethod
    def from_raw(cls, raw: str | None) -> Category:
        if not raw:
            return cls.GENERAL
        try:
            return cls(raw)
        except ValueError:
            pass
        # Accept case-insensitive input from the console ("urgent", "code ideas").
        folded = str(raw).strip().casefold()
        for member in cls:
            if member.value.casefold() == folded:
                return member
        return cls.GENERAL


_CATEGORY_RANK = {
    Category.URGENT: 0,
    Category.FREELANCING: 1,
    Category.CODE_IDEAS: 2,
    Category.GENERAL: 3,
}


class SortMode(StrEnum):
    DATE = "date"
    PRIORITY = "priority"

    @classmethod
    def from_raw(cls, raw: str | None) -> SortMode:
        if not raw:
            return cls.DATE
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.DATE


def _opt_float(raw: Any) -> float | None:
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


@dataclass(slots=True)
class Task:
    id: str
    title: str
    content: str
    category: Category

    created_at: float
    updated_at: float
    due_at: float | None = None

    completed: bool = False
    scheduled: bool = False
    notified: bool = False
    overdue_notified: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category.value,
            "dueDateTime": self.due_at,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "scheduled": self.scheduled,
            "notified": self.notified,
            "overdueNotified": self.overdue_notified,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        due_at = _opt_float(data.get("dueDateTime"))
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            category=Category.from_raw(data.get("category")),
            created_at=float(data.get("createdAt") or 0.0),
            updated_at=float(data.get("updatedAt") or 0.0),
            due_at=due_at,
            completed=bool(data.get("completed", False)),
            scheduled=bool(data.get("scheduled", due_at is not None)),
            notified=bool(data.get("notified", False)),
            overdue_notified=bool(data.get("overdueNotified", False)),
        )


@dataclass(slots=True)
class Preferences:
    """Persisted user preferences ("settings" snapshot)."""

    sort_by: SortMode = SortMode.DATE
    notifications_enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "sortBy": self.sort_by.value,
            "notificationsEnabled": self.notifications_enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Preferences:
        # Older snapshots used "notifications" for the flag.
        enabled = data.get("notificationsEnabled", data.get("notifications", True))
        return cls(
            sort_by=SortMode.from_raw(data.get("sortBy")),
            notifications_enabled=bool(enabled),
        )
