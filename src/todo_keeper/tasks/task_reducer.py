# src/todo_keeper/tasks/task_reducer.py

from __future__ import annotations

"""
Pure state transitions for the task list.

reduce(state, action) never mutates its input. When an action changes nothing
the very same state object is returned, so callers can detect no-ops with `is`.
"""

from dataclasses import dataclass, field, replace

from .task_models import Task


@dataclass(frozen=True, slots=True)
class TodoState:
    tasks: tuple[Task, ...] = ()
    # Edit session is ephemeral: never persisted, lost on restart.
    editing_task_id: str | None = None
    editing_text: str = ""

    def find(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None


@dataclass(frozen=True, slots=True)
class LoadTasks:
    tasks: tuple[Task, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class AddTask:
    task_id: str
    text: str


@dataclass(frozen=True, slots=True)
class ToggleTask:
    task_id: str


@dataclass(frozen=True, slots=True)
class DeleteTask:
    task_id: str


@dataclass(frozen=True, slots=True)
class BeginEdit:
    task_id: str


@dataclass(frozen=True, slots=True)
class SetEditingText:
    text: str


@dataclass(frozen=True, slots=True)
class CommitEdit:
    pass


@dataclass(frozen=True, slots=True)
class CancelEdit:
    pass


Action = (
    LoadTasks
    | AddTask
    | ToggleTask
    | DeleteTask
    | BeginEdit
    | SetEditingText
    | CommitEdit
    | CancelEdit
)


def _clear_edit(state: TodoState) -> TodoState:
    if state.editing_task_id is None and not state.editing_text:
        return state
    return replace(state, editing_task_id=None, editing_text="")


def reduce(state: TodoState, action: Action) -> TodoState:
    if isinstance(action, LoadTasks):
        return TodoState(tasks=tuple(action.tasks))

    if isinstance(action, AddTask):
        text = action.text.strip()
        if not text:
            return state
        if state.find(action.task_id) is not None:
            raise ValueError(f"duplicate task id: {action.task_id}")
        return replace(state, tasks=(*state.tasks, Task(id=action.task_id, text=text)))

    if isinstance(action, ToggleTask):
        if state.find(action.task_id) is None:
            return state
        return replace(
            state,
            tasks=tuple(
                replace(t, completed=not t.completed) if t.id == action.task_id else t
                for t in state.tasks
            ),
        )

    if isinstance(action, DeleteTask):
        if state.find(action.task_id) is None:
            return state
        new_state = replace(state, tasks=tuple(t for t in state.tasks if t.id != action.task_id))
        if new_state.editing_task_id == action.task_id:
            new_state = _clear_edit(new_state)
        return new_state

    if isinstance(action, BeginEdit):
        task = state.find(action.task_id)
        if task is None:
            return state
        # Starting a new edit silently drops any unsaved one.
        return replace(state, editing_task_id=task.id, editing_text=task.text)

    if isinstance(action, SetEditingText):
        if state.editing_task_id is None or state.editing_text == action.text:
            return state
        return replace(state, editing_text=action.text)

    if isinstance(action, CommitEdit):
        editing_id = state.editing_task_id
        if editing_id is None:
            return state
        text = state.editing_text.strip()
        if not text or state.find(editing_id) is None:
            return _clear_edit(state)
        # Finishing an edit also marks the task completed.
        tasks = tuple(
            replace(t, text=text, completed=True) if t.id == editing_id else t
            for t in state.tasks
        )
        return TodoState(tasks=tasks)

    if isinstance(action, CancelEdit):
        return _clear_edit(state)

    raise TypeError(f"unknown action: {action!r}")
