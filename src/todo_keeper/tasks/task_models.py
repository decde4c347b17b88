# src/todo_keeper/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single to-do item.

    Notes:
    - id is opaque; only uniqueness within the list matters.
    - text is stored trimmed and is never blank.
    """

    id: str
    text: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "completed": self.completed}

    @classmethod
    def from_dict(cls, raw: Any) -> Task | None:
        """Build a Task from its stored shape, or None if the entry is unusable."""
        if not isinstance(raw, dict):
            return None

        task_id = raw.get("id")
        text = raw.get("text")
        completed = raw.get("completed", False)

        if not isinstance(task_id, str) or not task_id.strip():
            return None
        if not isinstance(text, str) or not text.strip():
            return None
        if not isinstance(completed, bool):
            return None

        return cls(id=task_id, text=text.strip(), completed=completed)
