# src/todo_keeper/tasks/task_codec.py

"""
JSON codec for the persisted task list.

Stored value: a JSON array of {"id": str, "text": str, "completed": bool}.

Load policy:
- key absent             -> empty list
- not JSON / not a list  -> MalformedTasksError (caller falls back to empty)
- bad entries            -> skipped
- duplicate ids          -> first one wins
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from .task_models import Task

logger = logging.getLogger(__name__)


class MalformedTasksError(ValueError):
    """Persisted value exists but is not a JSON array."""


def dump_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)


def parse_tasks(raw: str | None) -> list[Task]:
    if raw is None:
        return []

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedTasksError(f"stored tasks are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedTasksError(f"stored tasks must be a JSON array, got {type(data).__name__}")

    out: list[Task] = []
    seen: set[str] = set()
    for idx, entry in enumerate(data):
        task = Task.from_dict(entry)
        if task is None:
            logger.warning("Skipping malformed task entry at index %d", idx)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id=%s at index %d", task.id, idx)
            continue
        seen.add(task.id)
        out.append(task)
    return out
