# src/devdesk/cli/commands.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime

from ..core.ports import Severity
from ..core.state import AppState
from ..core.timeutil import format_clock, parse_due
from ..tasks.task_api import describe_task, summarize_task
from ..tasks.task_models import Category, SortMode, Task
from ..timer.timer_engine import progress_band
from ..timer.timer_models import TimerMode

CommandHandler = Callable[[AppState, list[str], str], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string (possibly empty) or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        rest = line[1:].strip()[len(parts[0]):].strip()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args, rest)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_fields(rest: str) -> list[str]:
    # Fields are separated by "|"; a literal "\n" in content becomes a newline.
    return [f.strip().replace("\\n", "\n") for f in rest.split("|")]


def _resolve_task(state: AppState, token: str) -> Task | None:
    """Exact id, or a unique id prefix (as shown by /list)."""
    token = (token or "").strip()
    if not token:
        return None
    task = state.tasks.get(token)
    if task is not None:
        return task
    matches = [t for t in state.tasks.tasks if t.id.startswith(token)]
    return matches[0] if len(matches) == 1 else None


def _highlight_minutes(state: AppState) -> float:
    return float(getattr(state.settings, "due_highlight_minutes", 30))


# ---- general ----


def cmd_help(state: AppState, args: list[str], rest: str) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], rest: str) -> str:
    notif = "ON" if state.preferences.notifications_enabled else "OFF"
    banner = "granted" if state.desktop is not None and state.desktop.permission_granted else "unavailable"
    return (
        "Status:\n"
        f"  Tasks: {len(state.tasks)} (sorted by {state.tasks.sort_mode.value})\n"
        f"  Notifications: {notif}\n"
        f"  Desktop banner: {banner}\n"
        f"  Timer: {_timer_line(state)}\n"
        f"  Completed sessions: {len(state.timer.sessions)}"
    )


# ---- tasks ----


def cmd_add(state: AppState, args: list[str], rest: str) -> str:
    """
    /add title | content | category | due
    Only the title is required. Due: YYYY-MM-DD HH:MM (local time).
    """
    fields = _split_fields(rest) + ["", "", "", ""]
    title, content, category, due_raw = fields[:4]

    if not title:
        state.sink.notify("Please enter a task title", Severity.ERROR)
        return "Usage: /add title | content | category | due"

    try:
        due_at = parse_due(due_raw)
    except ValueError as e:
        state.sink.notify(str(e), Severity.ERROR)
        return ""

    task_id = state.tasks.create(title, content, Category.from_raw(category), due_at)
    state.sink.notify("Task added successfully!", Severity.SUCCESS)
    return f"Created task {task_id[:8]}."


def cmd_edit(state: AppState, args: list[str], rest: str) -> str:
    """
    /edit id | title | content | category | due
    Omitted trailing fields keep their current value; due "-" clears it.
    """
    fields = _split_fields(rest)
    task = _resolve_task(state, fields[0] if fields else "")
    if task is None:
        state.sink.notify("Task not found", Severity.ERROR)
        return ""

    values = fields[1:]
    title = values[0] if len(values) > 0 else task.title
    content = values[1] if len(values) > 1 else task.content
    category = Category.from_raw(values[2]) if len(values) > 2 and values[2] else task.category

    if not title:
        state.sink.notify("Please enter a task title", Severity.ERROR)
        return ""

    due_at = task.due_at
    if len(values) > 3:
        try:
            due_at = parse_due(values[3])
        except ValueError as e:
            state.sink.notify(str(e), Severity.ERROR)
            return ""

    if not state.tasks.update(task.id, title, content, category, due_at):
        state.sink.notify("Task not found", Severity.ERROR)
        return ""
    state.sink.notify("Task updated successfully!", Severity.SUCCESS)
    return ""


def cmd_delete(state: AppState, args: list[str], rest: str) -> str:
    task = _resolve_task(state, args[0] if args else "")
    if task is None:
        state.sink.notify("Task not found", Severity.ERROR)
        return ""
    state.tasks.delete(task.id)
    state.sink.notify("Task deleted successfully!", Severity.SUCCESS)
    return ""


def cmd_list(state: AppState, args: list[str], rest: str) -> str:
    tasks = state.tasks.tasks
    if not tasks:
        return "No tasks yet. Create your first task with /add."
    now = time.time()
    window = _highlight_minutes(state)
    lines = [f"Tasks (sorted by {state.tasks.sort_mode.value}):"]
    lines.extend(summarize_task(t, now=now, window_minutes=window) for t in tasks)
    return "\n".join(lines)


def cmd_show(state: AppState, args: list[str], rest: str) -> str:
    task = _resolve_task(state, args[0] if args else "")
    if task is None:
        return "Task not found."
    active = state.timer.active_task
    return describe_task(
        task,
        now=time.time(),
        renderer=state.renderer,
        window_minutes=_highlight_minutes(state),
        active_task_id=active.task_id if active else None,
    )


def cmd_sort(state: AppState, args: list[str], rest: str) -> str:
    if not args or args[0].lower() not in (SortMode.DATE.value, SortMode.PRIORITY.value):
        return "Usage: /sort date | /sort priority"
    mode = SortMode(args[0].lower())
    state.tasks.set_sort_mode(mode)
    state.preferences.sort_by = mode
    state.save_preferences()
    state.sink.notify(f"Sorted by {mode.value}", Severity.INFO)
    return ""


def cmd_check(state: AppState, args: list[str], rest: str) -> str:
    alerts = state.monitor.check()
    return f"Due-date check done ({len(alerts)} new alert(s))."


def cmd_notify(state: AppState, args: list[str], rest: str) -> str:
    if not args:
        on = state.preferences.notifications_enabled
        return f"Notifications are {'ON' if on else 'OFF'}. Use /notify on or /notify off."

    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes"):
        state.preferences.notifications_enabled = True
    elif arg in ("off", "0", "false", "no"):
        state.preferences.notifications_enabled = False
    else:
        return "Usage: /notify on or /notify off."

    state.save_preferences()
    return f"Notifications {'enabled' if state.preferences.notifications_enabled else 'disabled'}."


# ---- timer ----


def _timer_line(state: AppState) -> str:
    timer = state.timer
    line = (
        f"{timer.mode.label} {format_clock(timer.current_duration)} "
        f"[{timer.state.value}, {int(timer.progress * 100)}% {progress_band(timer.progress)}]"
    )
    if timer.mode == TimerMode.POMODORO:
        line += f" session {timer.current_session}/{timer.total_sessions}"
    if timer.active_task is not None:
        line += f" - Working on: {timer.active_task.title}"
    return line


def cmd_timer(state: AppState, args: list[str], rest: str) -> str:
    """
    /timer                      -> show status
    /timer start|pause|reset
    /timer mode pomodoro|deep-work|custom
    /timer custom H M S
    /timer task <id>
    """
    timer = state.timer
    if not args:
        return _timer_line(state)

    sub = args[0].lower()

    if sub == "start":
        timer.start()
        return ""
    if sub == "pause":
        timer.pause()
        return ""
    if sub == "reset":
        timer.reset()
        return _timer_line(state)

    if sub == "mode":
        if len(args) < 2:
            return "Usage: /timer mode pomodoro | deep-work | custom"
        timer.set_mode(TimerMode.from_raw(args[1]))
        return _timer_line(state)

    if sub == "custom":
        try:
            h, m, s = ([int(a) for a in args[1:4]] + [0, 0, 0])[:3]
        except ValueError:
            return "Usage: /timer custom H M S"
        timer.set_custom_duration(h, m, s)
        if timer.mode != TimerMode.CUSTOM:
            timer.set_mode(TimerMode.CUSTOM)
        return _timer_line(state)

    if sub == "task":
        task = _resolve_task(state, args[1] if len(args) > 1 else "")
        if task is None:
            state.sink.notify("Task not found", Severity.ERROR)
            return ""
        timer.set_active_task(task.id, task.title)
        state.sink.notify(f"Timer ready for: {task.title}", Severity.INFO)
        return ""

    return "Unknown /timer subcommand. Use /help."


def cmd_quick(state: AppState, args: list[str], rest: str) -> str:
    try:
        minutes = int(args[0])
    except (IndexError, ValueError):
        return "Usage: /quick <minutes>"
    if minutes <= 0:
        return "Usage: /quick <minutes>"
    state.timer.set_timer_for_task(minutes)
    state.sink.notify(f"Timer set for {minutes} minutes for this task!", Severity.SUCCESS)
    return ""


def cmd_sessions(state: AppState, args: list[str], rest: str) -> str:
    sessions = state.timer.sessions
    if not sessions:
        return "No completed timer sessions yet."
    lines = [f"Completed sessions ({len(sessions)}), latest first:"]
    for s in reversed(sessions[-10:]):
        when = datetime.fromtimestamp(s.completed_at).strftime("%Y-%m-%d %H:%M")
        task = f" - {s.task_label}" if s.task_label else ""
        lines.append(f"  {when}  {s.mode.label:<9} {format_clock(s.duration_seconds)}{task}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show tasks/timer/notification status.")
registry.register("add", cmd_add, help_text="Add a task: /add title | content | category | YYYY-MM-DD HH:MM.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit id | title | content | category | due.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete id.", aliases=["rm"])
registry.register("list", cmd_list, help_text="List tasks in the current sort order.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task with rendered content: /show id.")
registry.register("sort", cmd_sort, help_text="Sort tasks: /sort date | /sort priority.")
registry.register("check", cmd_check, help_text="Run the due-date check now.")
registry.register("notify", cmd_notify, help_text="Desktop notifications: /notify on | /notify off.")
registry.register(
    "timer",
    cmd_timer,
    help_text="Timer: /timer [start|pause|reset|mode M|custom H M S|task id].",
)
registry.register("quick", cmd_quick, help_text="Start a custom timer right away: /quick <minutes>.")
registry.register("sessions", cmd_sessions, help_text="Show completed timer sessions.")
