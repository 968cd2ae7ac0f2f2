# src/devdesk/tasks/task_repository.py

from __future__ import annotations

import itertools
import logging
import time
import uuid

from ..core.ports import Clock, SnapshotRepo
from .task_models import Category, SortMode, Task

logger = logging.getLogger(__name__)


class TaskRepository:
    """
    In-memory task list backed by a snapshot store.

    - loaded once at construction
    - every mutation writes the whole collection back, then re-sorts
    - input validation (non-empty title) is the caller's job
    """

    def __init__(
        self,
        store: SnapshotRepo,
        *,
        clock: Clock = time.time,
        sort_mode: SortMode = SortMode.DATE,
    ) -> None:
        self._store = store
        self._clock = clock
        self._sort_mode = SortMode(sort_mode)
        self._tasks: list[Task] = store.load_tasks()
        # Insertion order breaks created_at ties in date mode.
        self._counter = itertools.count()
        self._seq: dict[str, int] = {t.id: next(self._counter) for t in self._tasks}
        self.sort()
        logger.info("TaskRepository loaded tasks=%d sort=%s", len(self._tasks), self._sort_mode.value)

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def tasks(self) -> list[Task]:
        """Current order as a new list (tasks themselves are shared)."""
        return list(self._tasks)

    @property
    def sort_mode(self) -> SortMode:
        return self._sort_mode

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def save(self) -> None:
        self._store.save_tasks(self._tasks)

    # ---- mutations ----

    def create(
        self,
        title: str,
        content: str,
        category: Category | str,
        due_at: float | None,
    ) -> str:
        now = self._clock()
        task = Task(
            id=uuid.uuid4().hex,
            title=title,
            content=content,
            category=Category.from_raw(category),
            created_at=now,
            updated_at=now,
            due_at=due_at,
            completed=False,
            scheduled=due_at is not None,
            notified=False,
            overdue_notified=False,
        )
        self._tasks.append(task)
        self._seq[task.id] = next(self._counter)
        self.save()
        self.sort()
        logger.debug("Task created id=%s category=%s due_at=%s", task.id, task.category.value, due_at)
        return task.id

    def update(
        self,
        task_id: str,
        title: str,
        content: str,
        category: Category | str,
        due_at: float | None,
    ) -> bool:
        task = self.get(task_id)
        if task is None:
            logger.debug("Task update ignored: unknown id=%s", task_id)
            return False

        task.title = title
        task.content = content
        task.category = Category.from_raw(category)
        task.due_at = due_at
        task.updated_at = self._clock()
        task.scheduled = due_at is not None
        # Any edit re-arms the due-soon alert; overdue_notified is left alone.
        task.notified = False

        self.save()
        self.sort()
        logger.debug("Task updated id=%s due_at=%s", task_id, due_at)
        return True

    def delete(self, task_id: str) -> None:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        self._seq.pop(task_id, None)
        self.save()
        self.sort()
        if len(self._tasks) != before:
            logger.debug("Task deleted id=%s", task_id)

    def mark_due_soon_notified(self, task_id: str) -> None:
        task = self.get(task_id)
        if task is None or task.notified:
            return
        task.notified = True
        self.save()

    def mark_overdue_notified(self, task_id: str) -> None:
        task = self.get(task_id)
        if task is None or task.overdue_notified:
            return
        task.overdue_notified = True
        self.save()

    # ---- ordering ----

    def set_sort_mode(self, mode: SortMode | str) -> None:
        self._sort_mode = SortMode.from_raw(mode)
        self.sort()

    def sort(self) -> None:
        # list.sort is stable: equal keys keep their previous relative order.
        if self._sort_mode == SortMode.PRIORITY:
            self._tasks.sort(key=lambda t: t.category.rank)
        else:
            self._tasks.sort(key=lambda t: (t.created_at, self._seq.get(t.id, 0)))
