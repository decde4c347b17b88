# tests/test_kv_store.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_keeper.storage.kv_store import (
    JsonFileKeyValueStore,
    SQLiteKeyValueStore,
    StorageReadError,
    StorageWriteError,
    open_storage,
)


@pytest.fixture(params=["sqlite", "json"])
def make_store(request, tmp_path: Path):
    def factory():
        if request.param == "sqlite":
            return SQLiteKeyValueStore(tmp_path / "kv.sqlite3")
        return JsonFileKeyValueStore(tmp_path / "kv.json")

    return factory


def test_get_set_overwrite_remove(make_store) -> None:
    kv = make_store()
    assert kv.get_item("tasks") is None

    kv.set_item("tasks", "[]")
    kv.set_item("tasks", '[{"id": "1"}]')
    kv.set_item("other", "x")
    assert kv.get_item("tasks") == '[{"id": "1"}]'

    kv.remove_item("tasks")
    assert kv.get_item("tasks") is None
    assert kv.get_item("other") == "x"


def test_value_survives_reopen(make_store) -> None:
    make_store().set_item("tasks", "[1, 2, 3]")
    assert make_store().get_item("tasks") == "[1, 2, 3]"


def test_json_store_corrupt_file_read_error_and_recovery(tmp_path: Path) -> None:
    path = tmp_path / "kv.json"
    path.write_text("{broken", "utf-8")
    kv = JsonFileKeyValueStore(path)

    with pytest.raises(StorageReadError):
        kv.get_item("tasks")

    kv.set_item("tasks", "[]")
    assert kv.get_item("tasks") == "[]"


def test_json_store_write_error_when_target_is_directory(tmp_path: Path) -> None:
    path = tmp_path / "kv.json"
    path.mkdir()
    kv = JsonFileKeyValueStore(path)

    with pytest.raises(StorageWriteError):
        kv.set_item("tasks", "[]")


def test_sqlite_store_read_error_on_garbage_db(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    kv = SQLiteKeyValueStore(db)
    db.write_bytes(b"this is not a sqlite database at all" * 100)
    for extra in (tmp_path / "kv.sqlite3-wal", tmp_path / "kv.sqlite3-shm"):
        extra.unlink(missing_ok=True)

    with pytest.raises(StorageReadError):
        kv.get_item("tasks")


def test_open_storage_picks_backend(tmp_path: Path) -> None:
    sqlite_kv = open_storage(SimpleNamespace(storage_backend="sqlite", storage_path=tmp_path / "a.sqlite3"))
    json_kv = open_storage(SimpleNamespace(storage_backend="JSON", storage_path=tmp_path / "a.json"))

    assert isinstance(sqlite_kv, SQLiteKeyValueStore)
    assert isinstance(json_kv, JsonFileKeyValueStore)

    with pytest.raises(ValueError):
        open_storage(SimpleNamespace(storage_backend="redis", storage_path=tmp_path / "x"))


def test_unencodable_text_raises_write_error(make_store) -> None:
    kv = make_store()
    kv.set_item("tasks", "[]")

    with pytest.raises(StorageWriteError):
        kv.set_item("tasks", '[{"id": "1", "text": "bad \udcff byte"}]')
    assert kv.get_item("tasks") == "[]"
