# src/todo_keeper/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete backends.
This keeps storage swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Callable, Protocol

if TYPE_CHECKING:
    from ..tasks.task_reducer import TodoState


class KeyValueStorage(Protocol):
    """
    Durable key-value slot (AsyncStorage-like).

    Implementations raise StorageReadError / StorageWriteError on I/O failure.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
    def close(self) -> None: ...


# Called after every state change with (previous, current).
StateListener = Callable[["TodoState", "TodoState"], None]
