# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_keeper.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "APP_NAME",
        "LOG_LEVEL",
        "CONSOLE_ENABLED",
        "DATA_DIR",
        "STORAGE_BACKEND",
        "STORAGE_PATH",
        "STORAGE_KEY",
        "PERSIST_DEBOUNCE_MS",
    ):
        monkeypatch.delenv(f"TODO_KEEPER_{name}", raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "todo-keeper"
    assert s.storage_backend == "sqlite"
    assert s.storage_path == Path(".local/todo_keeper") / "tasks.sqlite3"
    assert s.storage_key == "tasks"
    assert s.persist_debounce_ms == 0
    assert s.console_enabled is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_KEEPER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TODO_KEEPER_STORAGE_BACKEND", "JSON")
    monkeypatch.setenv("TODO_KEEPER_CONSOLE_ENABLED", "off")
    monkeypatch.setenv("TODO_KEEPER_PERSIST_DEBOUNCE_MS", "not-a-number")

    s = Settings.from_env()
    assert s.storage_backend == "json"
    assert s.storage_path == tmp_path / "tasks.json"
    assert s.console_enabled is False
    assert s.persist_debounce_ms == 0


def test_explicit_storage_path_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_KEEPER_STORAGE_PATH", str(tmp_path / "custom.db"))
    monkeypatch.setenv("TODO_KEEPER_PERSIST_DEBOUNCE_MS", "-5")

    s = Settings.from_env()
    assert s.storage_path == tmp_path / "custom.db"
    assert s.persist_debounce_ms == 0
