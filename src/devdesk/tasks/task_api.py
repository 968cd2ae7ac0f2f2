# src/devdesk/tasks/task_api.py

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.ports import MarkdownRenderer
from ..core.timeutil import format_due
from .task_models import Task

logger = logging.getLogger(__name__)


class DueState(StrEnum):
    NONE = "none"
    SCHEDULED = "scheduled"
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"


def due_state(task: Task, now: float, *, window_minutes: float = 30.0) -> DueState:
    """Card highlight: overdue, due within the window, or just scheduled."""
    if task.due_at is None:
        return DueState.NONE
    if task.due_at < now:
        return DueState.OVERDUE
    if task.due_at - now <= window_minutes * 60.0:
        return DueState.DUE_SOON
    return DueState.SCHEDULED


def render_task_content(task: Task, renderer: MarkdownRenderer | None) -> str:
    """
    Render task content through the markdown renderer.

    Any renderer failure falls back to the raw text.
    """
    text = task.content or ""
    if renderer is None:
        return text
    try:
        return renderer.render(text)
    except Exception:
        logger.debug("Markdown render failed for task_id=%s; using raw text.", task.id, exc_info=True)
        return text


def describe_task(
    task: Task,
    *,
    now: float,
    renderer: MarkdownRenderer | None = None,
    window_minutes: float = 30.0,
    active_task_id: str | None = None,
) -> str:
    """Multi-line console card for one task."""
    state = due_state(task, now, window_minutes=window_minutes)
    marker = " ⏱" if active_task_id is not None and task.id == active_task_id else ""

    lines = [f"{task.title}{marker}  [{task.category.value}]  id={task.id}"]

    body = render_task_content(task, renderer)
    if body.strip():
        lines.extend(f"    {line}" for line in body.splitlines())

    if task.due_at is not None:
        suffix = {DueState.OVERDUE: " (Overdue)", DueState.DUE_SOON: " (Due Soon)"}.get(state, "")
        lines.append(f"    ⏰ {format_due(task.due_at)}{suffix}")

    return "\n".join(lines)


def summarize_task(task: Task, *, now: float, window_minutes: float = 30.0) -> str:
    """One line per task for /list."""
    state = due_state(task, now, window_minutes=window_minutes)
    flag = {DueState.OVERDUE: "!", DueState.DUE_SOON: "~"}.get(state, " ")
    due = format_due(task.due_at) if task.due_at is not None else ""
    return f"{flag} {task.id[:8]}  {task.category.value:<11}  {task.title}  {due}".rstrip()
