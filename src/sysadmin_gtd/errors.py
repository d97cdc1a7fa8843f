# src/sysadmin_gtd/errors.py

"""
Error taxonomy shared by the store, the controller and the CLI.

- NotFoundError: an operation referenced a task id that does not exist.
- ValidationError: a required field is empty or unparseable (form boundary).
- StorageError: the underlying SQLite database failed (disk, corruption, I/O).
"""

from __future__ import annotations


class TaskError(Exception):
    """Base class for every error raised by sysadmin_gtd."""


class NotFoundError(TaskError, LookupError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id


class ValidationError(TaskError, ValueError):
    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class StorageError(TaskError):
    pass
