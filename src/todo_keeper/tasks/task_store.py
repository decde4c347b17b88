# src/todo_keeper/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..core.ports import KeyValueStorage, StateListener
from ..storage.kv_store import StorageReadError
from .task_codec import MalformedTasksError, parse_tasks
from .task_models import Task
from .task_reducer import (
    Action,
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

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


class StoreStateError(RuntimeError):
    """Store used out of order (mutation before load, or load twice)."""


def _now_ms() -> int:
    return int(time.time() * 1000)


class TaskStore:
    """
    In-memory task list backed by one key of a durable key-value slot.

    Lifecycle:
    - load() exactly once at startup
    - mutations go through dispatch(), which runs the pure reducer
    - subscribers see (previous, current) after every change; persistence
      is one such subscriber (see TaskPersister.on_change)

    Single-threaded: call it from the UI/console thread only.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock_ms = clock_ms or _now_ms
        self._state = TodoState()
        self._listeners: list[StateListener] = []
        self._loaded = False
        self._last_id = 0

    # ---- read side ----

    @property
    def state(self) -> TodoState:
        return self._state

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._state.tasks

    @property
    def editing_task_id(self) -> str | None:
        return self._state.editing_task_id

    @property
    def editing_text(self) -> str:
        return self._state.editing_text

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def key(self) -> str:
        return self._key

    def get(self, task_id: str) -> Task | None:
        return self._state.find(task_id)

    # ---- lifecycle ----

    def load(self) -> list[Task]:
        """
        Restore the list from storage. Absent, unreadable or malformed data
        all start from an empty list; failures are logged, never raised.
        """
        if self._loaded:
            raise StoreStateError("TaskStore.load() must run only once")

        tasks: list[Task] = []
        try:
            tasks = parse_tasks(self._storage.get_item(self._key))
        except StorageReadError:
            logger.exception("Failed to load tasks from storage key=%s", self._key)
        except MalformedTasksError:
            logger.exception("Stored tasks under key=%s are malformed; starting empty", self._key)

        self._state = reduce(self._state, LoadTasks(tuple(tasks)))
        self._loaded = True
        logger.info("TaskStore loaded key=%s total=%d", self._key, len(tasks))
        return list(tasks)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> TodoState:
        if not self._loaded:
            raise StoreStateError("TaskStore.load() must run before any mutation")

        previous = self._state
        current = reduce(previous, action)
        if current is previous:
            return current

        self._state = current
        for listener in list(self._listeners):
            try:
                listener(previous, current)
            except Exception:
                # In-memory state stays authoritative.
                logger.exception("State listener failed action=%s", type(action).__name__)
        return current

    # ---- operations ----

    def _next_id(self) -> str:
        candidate = max(self._clock_ms(), self._last_id + 1)
        existing = {t.id for t in self._state.tasks}
        while str(candidate) in existing:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def add(self, text: str) -> Task | None:
        if not self._loaded:
            raise StoreStateError("TaskStore.load() must run before any mutation")
        if not text or not text.strip():
            return None
        task_id = self._next_id()
        self.dispatch(AddTask(task_id=task_id, text=text))
        logger.debug("Task added id=%s", task_id)
        return self.get(task_id)

    def toggle(self, task_id: str) -> bool:
        before = self._state
        return self.dispatch(ToggleTask(task_id)) is not before

    def delete(self, task_id: str) -> bool:
        before = self._state
        removed = self.dispatch(DeleteTask(task_id)) is not before
        if removed:
            logger.debug("Task deleted id=%s", task_id)
        return removed

    def begin_edit(self, task_id: str) -> bool:
        return self.dispatch(BeginEdit(task_id)).editing_task_id == task_id

    def set_editing_text(self, text: str) -> None:
        self.dispatch(SetEditingText(text))

    def commit_edit(self) -> Task | None:
        editing_id = self._state.editing_task_id
        before = self._state
        after = self.dispatch(CommitEdit())
        if editing_id is None or after.tasks is before.tasks:
            return None
        return after.find(editing_id)

    def cancel_edit(self) -> None:
        self.dispatch(CancelEdit())
