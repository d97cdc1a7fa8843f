# src/sysadmin_gtd/core/ports.py

"""
Ports (interfaces) used by the core.

The controller depends on this Protocol instead of the concrete SQLite store,
which keeps it testable against in-memory and failing fakes.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from ..tasks.task_models import Priority, Task


class TaskRepo(Protocol):
    # Day view
    def get_tasks_for_date(self, date: str, context: str) -> list[Task]: ...
    def get_task(self, task_id: int) -> Task: ...

    # Mutations
    def add_task(
            self,
            date: str,
            description: str,
            priority: Priority,
            time_estimate: str,
            context: str,
    ) -> int: ...
    def update_task(self, task_id: int, description: str, priority: Priority, time_estimate: str) -> None: ...
    def delete_task(self, task_id: int) -> None: ...
    def mark_complete(self, task_id: int) -> None: ...
    def mark_incomplete(self, task_id: int) -> None: ...

    # Carry-over / import
    def get_carry_over_candidates(self, from_date: str, to_date: str, context: str) -> list[Task]: ...
    def carry_over_tasks(self, tasks: Iterable[Task], to_date: str, context: str) -> int: ...
    def get_latest_date_with_incomplete_tasks(self, before_date: str, context: str) -> str | None: ...
    def copy_incomplete_tasks(self, from_date: str, to_date: str, context: str) -> int: ...
