# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting without opening the code.
"""

ENV_VARS = {
    # App / logging
    "TODO_KEEPER_APP_NAME": "App display name (default: todo-keeper).",
    "TODO_KEEPER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TODO_KEEPER_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Durable storage slot
    "TODO_KEEPER_DATA_DIR": "Local data dir for storage and logs (default: .local/todo_keeper).",
    "TODO_KEEPER_STORAGE_BACKEND": "sqlite | json (default: sqlite).",
    "TODO_KEEPER_STORAGE_PATH": "Storage file (default: <data_dir>/tasks.sqlite3 or tasks.json).",
    "TODO_KEEPER_STORAGE_KEY": "Key holding the serialized task list (default: tasks).",
    # Persistence tuning
    "TODO_KEEPER_PERSIST_DEBOUNCE_MS": "Wait this long to collapse bursts of edits into one write (default: 0).",
}
