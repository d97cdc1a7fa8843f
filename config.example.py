# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a
local .env file, read by python-dotenv). This file exists to make the repo
self-documenting.
"""

ENV_VARS = {
    # App / logging
    "GTD_APP_NAME": "App display name used in logs (default: gtd).",
    "GTD_LOG_LEVEL": "Console logging level (default: WARNING).",
    "GTD_LOG_TO_FILE": "Write full debug logs to <data_dir>/gtd.log (true/false, default: true).",
    # Tasks
    "GTD_DEFAULT_CONTEXT": "Context used when --context is not given (default: default).",
    # Paths
    "GTD_DATA_DIR": "Local data directory (default: $XDG_CONFIG_HOME/sysadmin-gtd or ~/.config/sysadmin-gtd).",
    "GTD_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.db). Overridden by --db.",
}
