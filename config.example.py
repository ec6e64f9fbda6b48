# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Nothing here is secret; .env is just the convenient place for local overrides.
"""

ENV_VARS = {
    # App / logging
    "UNITRACK_APP_NAME": "App display name (default: unitrack).",
    "UNITRACK_LOG_LEVEL": "Logging level; the console never shows less than WARNING (default: INFO).",
    # Paths
    "UNITRACK_DATA_DIR": "Local data directory for storage and logs (default: .local/unitrack).",
    "UNITRACK_STORAGE_PATH": "SQLite key-value file (default: <data_dir>/storage.sqlite3).",
    "UNITRACK_STORAGE_KEY": "Key holding the serialized task list (default: universityTasks).",
    # Console
    "UNITRACK_CONFIRM_DELETE": "Ask before /rm deletes a task (true/false, default: true).",
    "UNITRACK_DEFAULT_FILTER": "Initial /list view: all|pending|completed|overdue|high_priority.",
}
