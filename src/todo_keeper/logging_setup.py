# src/todo_keeper/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME = "todo_keeper.log"

# Background writers; their INFO/DEBUG lines would interleave with the prompt.
_QUIET_PREFIXES = ("todo_keeper.storage.", "todo_keeper.tasks.task_persister")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive prompt readable:
    - todo_keeper logs pass, except storage/persister chatter below WARNING
    - anything else only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith("todo_keeper."):
            return record.levelno >= logging.ERROR
        if record.name.startswith(_QUIET_PREFIXES):
            return record.levelno >= logging.WARNING
        return True


def resolve_level(name: str | int, default: int = logging.INFO) -> int:
    """Map "debug" / "INFO" / 10 to a logging level, falling back to default."""
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo_keeper",
    console_level: str | int = logging.INFO,
) -> Path:
    """
    Console on stderr (filtered, console_level) plus a DEBUG log file in log_dir.

    Replaces existing root handlers, so call it once at startup.
    Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolve_level(console_level))
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in (console, file_handler):
        h.setFormatter(fmt)
        root.addHandler(h)
    root.setLevel(logging.DEBUG)

    return log_file
