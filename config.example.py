# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name (default: taskflow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: INFO).",
    # Storage
    "TASKFLOW_FORCE_MEMORY": "Skip SQLite and keep tasks in memory only (true/false).",
    # Paths (gitignored)
    "TASKFLOW_DATA_DIR": "Local data directory (default: .local/taskflow).",
    "TASKFLOW_TASKS_DB_PATH": "Task store SQLite path (default: <data_dir>/tasks.sqlite3).",
    "TASKFLOW_UI_STATE_PATH": "UI preferences JSON path (default: <data_dir>/ui_state.json).",
}
