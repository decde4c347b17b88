# src/todo_keeper/tasks/task_persister.py

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Iterable

from ..core.ports import KeyValueStorage
from ..storage.kv_store import StorageWriteError
from .task_codec import dump_tasks
from .task_models import Task
from .task_reducer import TodoState

logger = logging.getLogger(__name__)


class TaskPersister:
    """
    Serialized write queue for the task list.

    Design goals:
    - Does not block the caller: writes happen in a worker thread.
    - Exactly one write in flight at a time, in submission order.
    - Bursts collapse: if several snapshots are queued, only the newest is written.
    - Write failures are logged and swallowed (in-memory state stays authoritative).
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = "tasks",
        debounce_seconds: float = 0.0,
    ) -> None:
        self._storage = storage
        self._key = key
        self._debounce_s = max(0.0, float(debounce_seconds))

        self._queue: "queue.Queue[str | None]" = queue.Queue()
        self._stop_requested = False

        self.writes = 0
        self.write_failures = 0
        self.last_error: BaseException | None = None

        self._worker = threading.Thread(target=self._run, name="task-persister", daemon=True)
        self._worker.start()
        logger.debug("TaskPersister started key=%s debounce=%.3fs", key, self._debounce_s)

    def _write(self, payload: str) -> None:
        try:
            self._storage.set_item(self._key, payload)
        except StorageWriteError as e:
            self.write_failures += 1
            self.last_error = e
            logger.exception("Failed to save tasks to storage key=%s", self._key)
            return
        except Exception as e:
            # The worker must survive, or queued snapshots never drain.
            self.write_failures += 1
            self.last_error = e
            logger.exception("Unexpected error saving tasks key=%s", self._key)
            return
        self.writes += 1

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            taken = 1
            try:
                if item is None:
                    logger.debug("TaskPersister received stop signal.")
                    return

                if self._debounce_s:
                    time.sleep(self._debounce_s)

                # Collapse whatever piled up meanwhile; only the newest snapshot matters.
                latest: str | None = item
                stop_after = False
                while True:
                    try:
                        nxt = self._queue.get_nowait()
                    except queue.Empty:
                        break
                    taken += 1
                    if nxt is None:
                        stop_after = True
                        break
                    latest = nxt

                if taken > 1:
                    logger.debug("TaskPersister coalesced %d snapshots", taken)
                if latest is not None:
                    self._write(latest)
                if stop_after:
                    return
            finally:
                for _ in range(taken):
                    self._queue.task_done()

    def submit(self, tasks: Iterable[Task]) -> None:
        """Queue a snapshot of the full list (serialized now, written later)."""
        payload = dump_tasks(tasks)
        if self._stop_requested:
            # Worker is gone; don't lose late mutations.
            self._write(payload)
            return
        self._queue.put(payload)

    def on_change(self, previous: TodoState, current: TodoState) -> None:
        """TaskStore subscriber: persist only when the task list itself changed."""
        if previous.tasks == current.tasks:
            return
        self.submit(current.tasks)

    def flush(self) -> None:
        """Block until every queued snapshot has been handled."""
        self._queue.join()

    def shutdown(self) -> None:
        """Write what is pending and stop the worker (idempotent)."""
        if self._stop_requested:
            return
        self._stop_requested = True

        self._queue.put(None)
        self._queue.join()
        self._worker.join(timeout=2.0)
        logger.debug("TaskPersister stopped writes=%d failures=%d", self.writes, self.write_failures)
