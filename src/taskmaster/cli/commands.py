# src/taskmaster/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from ..core.state import AppState
from ..tasks.task_models import HistoryEntry, Priority, Task, TaskFilter

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/add, /done, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting helpers ----


def _fmt_deadline(d: date) -> str:
    return d.strftime("%a, %b %d").replace(" 0", " ")


def format_task(task: Task, *, overdue: bool) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] {task.id}  {task.text}  ({task.priority.value})"
    if task.deadline is not None:
        line += f"  due {_fmt_deadline(task.deadline)}"
    if overdue:
        line += "  OVERDUE"
    return line


def format_history_entry(entry: HistoryEntry) -> str:
    local_ts = entry.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S")
    label = "Completed" if entry.event == "completed" else "Deleted"
    return f"{label}: {local_ts}  {entry.text}"


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Write report due=2024-01-01 priority=High
    """
    words: list[str] = []
    deadline: str | None = None
    priority: str = Priority.MEDIUM.value

    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in ("due", "deadline"):
            deadline = value
        elif sep and key.lower() in ("priority", "prio", "p"):
            priority = value
        else:
            words.append(arg)

    try:
        task = state.task_store.add_task(" ".join(words), deadline=deadline, priority=priority)
    except ValueError as e:
        return f"Not added: {e}"

    if task is None:
        return "Task text is empty. Usage: /add <text> [due=YYYY-MM-DD] [priority=Low|Medium|High]"
    return f"Added: {format_task(task, overdue=state.task_store.is_overdue(task))}"


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    task = state.task_store.toggle_task(task_id)
    if task is None:
        return f"No task with id {task_id}."
    return f"{'Completed' if task.completed else 'Reopened'}: {task.text}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /delete <id>"
    task = state.task_store.delete_task(task_id)
    if task is None:
        return f"No task with id {task_id}."
    return f"Deleted: {task.text}"


def cmd_clear(state: AppState, args: list[str]) -> str:
    removed = state.task_store.clear_completed()
    return f"Cleared {removed} completed task(s)."


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Filter is {state.filter.value}. Use /filter all | active | completed."
    try:
        state.filter = TaskFilter.parse(args[0])
    except ValueError as e:
        return str(e)
    logger.debug("Filter set to %s", state.filter.value)
    return f"Filter set to {state.filter.value}."


def cmd_list(state: AppState, args: list[str]) -> str:
    store = state.task_store
    tasks = store.filtered_view(state.filter)
    if not tasks:
        if state.filter is TaskFilter.ACTIVE:
            return "No tasks found. All tasks are completed!"
        if state.filter is TaskFilter.COMPLETED:
            return "No tasks found. No completed tasks yet."
        return "No tasks found. Start by adding one with /add."
    lines = [f"Tasks ({state.filter.value}):"]
    lines.extend(f"  {format_task(t, overdue=store.is_overdue(t))}" for t in tasks)
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str]) -> str:
    c = state.task_store.counts()
    return f"Active: {c.active}  Completed: {c.completed}  Overdue: {c.overdue}"


def cmd_history(state: AppState, args: list[str]) -> str:
    limit = state.history_limit
    if args:
        try:
            limit = int(args[0])
        except ValueError:
            return "Usage: /history [n]"
    entries = state.history.recent(limit)
    if not entries:
        return "No history yet."
    lines = ["Task history:"]
    lines.extend(f"  {format_history_entry(e)}" for e in entries)
    return "\n".join(lines)


def cmd_dark(state: AppState, args: list[str]) -> str:
    """
    /dark       -> toggle
    /dark on    -> enable
    /dark off   -> disable
    """
    if not args:
        state.theme.toggle()
    else:
        arg = args[0].lower()
        if arg in ("on", "1", "true", "yes"):
            state.theme.set(True)
        elif arg in ("off", "0", "false", "no"):
            state.theme.set(False)
        else:
            return "Usage: /dark on or /dark off."
    return f"Dark mode is {'ON' if state.theme.dark_mode else 'OFF'}."


def cmd_remind(state: AppState, args: list[str]) -> str:
    reminders = state.monitor.sweep()
    if not reminders:
        return "Nothing is due today."
    return f"{len(reminders)} task(s) due today."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add <text> [due=YYYY-MM-DD] [priority=Low|Medium|High]."
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register("filter", cmd_filter, help_text="Set the list filter: /filter all | active | completed.")
registry.register("list", cmd_list, help_text="Show tasks matching the current filter.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show active / completed / overdue counts.")
registry.register("history", cmd_history, help_text="Show recent completions and deletions: /history [n].")
registry.register("dark", cmd_dark, help_text="Dark mode: /dark | /dark on | /dark off.")
registry.register("remind", cmd_remind, help_text="Check for tasks due today now.")
