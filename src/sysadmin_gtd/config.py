# src/sysadmin_gtd/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing touches the filesystem at import time; directories are created
  lazily by whoever opens the files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "GTD"
APP_DIR_NAME = "sysadmin-gtd"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def user_config_dir() -> Path:
    # Same lookup order as the XDG spec: $XDG_CONFIG_HOME, then ~/.config.
    raw = os.getenv("XDG_CONFIG_HOME")
    if raw and raw.strip():
        return Path(raw).expanduser()
    return Path.home() / ".config"


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Tasks ----
    default_context: str

    # ---- Local data paths ----
    data_dir: Path
    tasks_db_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "gtd") or "gtd"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        default_context = _env(_k("DEFAULT_CONTEXT"), "default").strip() or "default"

        data_dir = _env_path(_k("DATA_DIR"), user_config_dir() / APP_DIR_NAME)
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.db")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            default_context=default_context,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
