# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_keeper.tasks.task_persister import TaskPersister
from todo_keeper.tasks.task_store import TaskStore

from .fakes import FakeKeyValueStorage, StepClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-keeper-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path / "data",
        storage_backend="sqlite",
        storage_path=tmp_path / "data" / "tasks.sqlite3",
        storage_key="tasks",
        persist_debounce_ms=0,
    )


@pytest.fixture()
def storage() -> FakeKeyValueStorage:
    return FakeKeyValueStorage()


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def store(storage: FakeKeyValueStorage, clock: StepClock) -> TaskStore:
    """Loaded TaskStore over fake storage (no persistence wired)."""
    s = TaskStore(storage, clock_ms=clock)
    s.load()
    return s


@pytest.fixture()
def persister(storage: FakeKeyValueStorage):
    p = TaskPersister(storage)
    yield p
    p.shutdown()
