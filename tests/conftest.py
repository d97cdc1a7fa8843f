# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from sysadmin_gtd.core.controller import DayController
from sysadmin_gtd.tasks.task_store import TaskStore

from .fakes import FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and main.

    We intentionally use a SimpleNamespace rather than reading the real
    environment, to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="gtd-test",
        log_level="WARNING",
        log_to_file=False,
        default_context="default",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.db",
    )


@pytest.fixture()
def store(tmp_path: Path):
    """
    Real SQLite store on a temp file.

    Store correctness is part of what we want to test, so no fakes here.
    """
    s = TaskStore(tmp_path / "tasks.db")
    yield s
    s.close()


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def controller(store: TaskStore) -> DayController:
    return DayController(store, date="2025-06-01", context="default")
