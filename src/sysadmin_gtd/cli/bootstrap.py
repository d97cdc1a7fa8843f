# src/sysadmin_gtd/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- resolves the database location from settings (or an explicit override),
- opens the TaskStore as a scoped resource,
- wires the store into a DayController for interactive use.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path

from ..config import Settings, get_settings
from ..core.controller import DayController
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def resolve_db_path(settings: Settings, override: str | Path | None = None) -> Path:
    if override is not None:
        return Path(override).expanduser()
    return settings.tasks_db_path


@contextlib.contextmanager
def open_store(settings: Settings | None = None, *, db_path: str | Path | None = None) -> Iterator[TaskStore]:
    """
    Open the task database and guarantee it is closed afterwards.

    The parent directory is created on first use.
    """
    if settings is None:
        settings = get_settings()
    path = resolve_db_path(settings, db_path)
    logger.debug("Opening task store at %s", path)
    store = TaskStore(path)
    try:
        yield store
    finally:
        store.close()


def create_controller(store: TaskStore, *, date: str, context: str) -> DayController:
    return DayController(store, date=date, context=context)
