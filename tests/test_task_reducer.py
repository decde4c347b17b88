# tests/test_task_reducer.py

from __future__ import annotations

import pytest

from todo_keeper.tasks.task_models import Task
from todo_keeper.tasks.task_reducer import (
    AddTask,
    BeginEdit,
    CancelEdit,
    CommitEdit,
    DeleteTask,
    LoadTasks,
    SetEditingText,
    TodoState,
    ToggleTask,
    reduce,
)


def _state(*tasks: Task, editing: str | None = None, text: str = "") -> TodoState:
    return TodoState(tasks=tuple(tasks), editing_task_id=editing, editing_text=text)


def test_reduce_does_not_mutate_input() -> None:
    start = _state(Task("1", "a"))
    after = reduce(start, ToggleTask("1"))

    assert start.tasks[0].completed is False
    assert after.tasks[0].completed is True
    assert after is not start


def test_noop_actions_return_same_state() -> None:
    start = _state(Task("1", "a"))
    assert reduce(start, AddTask("2", "   ")) is start
    assert reduce(start, ToggleTask("x")) is start
    assert reduce(start, DeleteTask("x")) is start
    assert reduce(start, BeginEdit("x")) is start
    assert reduce(start, SetEditingText("no edit active")) is start
    assert reduce(start, CommitEdit()) is start
    assert reduce(start, CancelEdit()) is start


def test_add_duplicate_id_is_rejected() -> None:
    with pytest.raises(ValueError):
        reduce(_state(Task("1", "a")), AddTask("1", "b"))


def test_delete_task_under_edit_clears_edit() -> None:
    start = _state(Task("1", "a"), Task("2", "b"), editing="2", text="bb")
    after = reduce(start, DeleteTask("2"))

    assert [t.id for t in after.tasks] == ["1"]
    assert after.editing_task_id is None
    assert after.editing_text == ""


def test_delete_other_task_keeps_edit() -> None:
    start = _state(Task("1", "a"), Task("2", "b"), editing="2", text="bb")
    after = reduce(start, DeleteTask("1"))

    assert after.editing_task_id == "2"
    assert after.editing_text == "bb"


def test_commit_edit_pins_completed_coupling() -> None:
    start = _state(Task("1", "a"), Task("2", "b"), editing="1", text="  new a ")
    after = reduce(start, CommitEdit())

    assert after.tasks == (Task("1", "new a", completed=True), Task("2", "b"))
    assert after.editing_task_id is None


def test_commit_edit_when_task_vanished_just_clears() -> None:
    start = _state(Task("2", "b"), editing="1", text="ghost")
    after = reduce(start, CommitEdit())

    assert after.tasks is start.tasks
    assert after.editing_task_id is None


def test_load_replaces_list_and_clears_edit() -> None:
    start = _state(Task("1", "a"), editing="1", text="x")
    after = reduce(start, LoadTasks((Task("9", "z", True),)))

    assert after == TodoState(tasks=(Task("9", "z", True),))


def test_unknown_action_raises() -> None:
    with pytest.raises(TypeError):
        reduce(TodoState(), object())  # type: ignore[arg-type]
