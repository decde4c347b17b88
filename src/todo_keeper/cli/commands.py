# src/todo_keeper/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

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
        emit: CommandEmitter | None = None,
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

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Plain text adds a task (or replaces the text while editing).")
        return "\n".join(lines)


registry = CommandRegistry()


def render_tasks(tasks: Iterable[Task], editing_task_id: str | None = None) -> str:
    lines: list[str] = []
    for i, t in enumerate(tasks, start=1):
        mark = "x" if t.completed else " "
        suffix = "  <- editing" if t.id == editing_task_id else ""
        lines.append(f"{i}. [{mark}] {t.text}  ({t.id}){suffix}")
    if not lines:
        return "No tasks yet. Type something to add one."
    return "\n".join(lines)


def resolve_task(state: AppState, ref: str) -> Task | None:
    """Resolve a 1-based list position or a task id."""
    tasks = state.store.tasks
    task = state.store.get(ref)
    if task is not None:
        return task
    try:
        pos = int(ref)
    except ValueError:
        return None
    if 1 <= pos <= len(tasks):
        return tasks[pos - 1]
    return None


def submit_text(state: AppState, line: str) -> str:
    """
    Submit a plain input line.

    While a task is being edited the line replaces its editing text,
    otherwise it becomes a new task.
    """
    store = state.store
    if store.editing_task_id is not None:
        store.set_editing_text(line)
        return f"Editing text: {store.editing_text!r}. Use /save to commit or /cancel."

    task = store.add(line)
    if task is None:
        return "Nothing to add: task text is empty."
    return f"Added #{len(store.tasks)}: {task.text}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_tasks(state.store.tasks, state.store.editing_task_id)


def cmd_add(state: AppState, args: list[str]) -> str:
    task = state.store.add(" ".join(args))
    if task is None:
        return "Usage: /add <text>"
    return f"Added #{len(state.store.tasks)}: {task.text}"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle <number|id>"
    task = resolve_task(state, args[0])
    if task is None or not state.store.toggle(task.id):
        return f"No such task: {args[0]}"
    updated = state.store.get(task.id)
    done = updated is not None and updated.completed
    return f"{'Completed' if done else 'Reopened'}: {task.text}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <number|id>"
    task = resolve_task(state, args[0])
    if task is None or not state.store.delete(task.id):
        return f"No such task: {args[0]}"
    return f"Deleted: {task.text}"


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <ref>  -> start editing; following plain text replaces the task text
    """
    if not args:
        return "Usage: /edit <number|id>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"

    previous = state.store.editing_task_id
    state.store.begin_edit(task.id)
    if emit and previous is not None and previous != task.id:
        emit("Previous unsaved edit discarded.")
    return f"Editing: {task.text!r}. Type the new text, then /save (or /cancel)."


def cmd_save(state: AppState, args: list[str]) -> str:
    if state.store.editing_task_id is None:
        return "Nothing is being edited."
    task = state.store.commit_edit()
    if task is None:
        return "Edit discarded: text was empty."
    return f"Saved and completed: {task.text}"


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if state.store.editing_task_id is None:
        return "Nothing is being edited."
    state.store.cancel_edit()
    return "Edit cancelled."


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks
    done = sum(1 for t in tasks if t.completed)
    settings = state.settings
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({done} done)\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} at {getattr(settings, 'storage_path', '?')}\n"
        f"  Writes: {state.persister.writes} ok, {state.persister.write_failures} failed"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show all tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", aliases=["a"])
registry.register("toggle", cmd_toggle, help_text="Flip done/not done: /toggle <number|id>.", aliases=["t"])
registry.register("delete", cmd_delete, help_text="Remove a task: /delete <number|id>.", aliases=["rm", "del"])
registry.register("edit", cmd_edit, help_text="Edit a task's text: /edit <number|id>.", aliases=["e"])
registry.register("save", cmd_save, help_text="Commit the current edit (also marks the task done).")
registry.register("cancel", cmd_cancel, help_text="Abandon the current edit.")
registry.register("status", cmd_status, help_text="Show counts and storage info.")
