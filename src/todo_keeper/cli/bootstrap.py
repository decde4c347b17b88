# src/todo_keeper/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage, TaskStore and TaskPersister into AppState,
- restores the task list exactly once.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import get_settings
from ..core.state import AppState
from ..storage.kv_store import open_storage
from ..tasks.task_persister import TaskPersister
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
    Path(settings.storage_path).parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = open_storage(settings)
    key = str(getattr(settings, "storage_key", "tasks"))
    debounce_s = int(getattr(settings, "persist_debounce_ms", 0)) / 1000.0

    store = TaskStore(storage, key=key)
    persister = TaskPersister(storage, key=key, debounce_seconds=debounce_s)
    store.subscribe(persister.on_change)
    store.load()

    return AppState(settings=settings, storage=storage, store=store, persister=persister)


def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.persister.shutdown()
    except Exception:
        logger.exception("Failed to flush pending task writes.")

    try:
        state.storage.close()
    except Exception:
        logger.debug("Storage close failed.", exc_info=True)
