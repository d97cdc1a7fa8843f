# src/sysadmin_gtd/tasks/task_models.py

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum

DEFAULT_CONTEXT = "default"


class Priority(StrEnum):
    """
    Task urgency, A = highest.

    Members sort alphabetically, which is also the urgency order, so the store
    can ORDER BY the raw column.
    """

    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @property
    def label(self) -> str:
        return _PRIORITY_LABELS[self]

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.B
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return cls.B

    @classmethod
    def options(cls) -> list[tuple[str, Priority]]:
        return [(p.label, p) for p in cls]


_PRIORITY_LABELS = {
    Priority.A: "A - Must do",
    Priority.B: "B - Should do",
    Priority.C: "C - Nice to do",
    Priority.D: "D - Delegate/defer",
}


@dataclass(slots=True)
class Task:
    id: int
    date: str  # yyyy-mm-dd
    context: str
    description: str
    priority: Priority
    time_estimate: str
    is_completed: bool = False

    # Informational back-reference; the source row may have been deleted since.
    carried_from_id: int | None = None

    @property
    def was_carried_over(self) -> bool:
        return self.carried_from_id is not None

    @property
    def display_description(self) -> str:
        if self.was_carried_over:
            return f"{self.description} (carried over)"
        return self.description

    @property
    def done_display(self) -> str:
        return "Yes" if self.is_completed else ""


def filter_tasks(tasks: Iterable[Task], predicate: Callable[[Task], bool]) -> list[Task]:
    return [t for t in tasks if predicate(t)]


def completion_summary(tasks: list[Task]) -> str:
    done = len(filter_tasks(tasks, lambda t: t.is_completed))
    return f"{done}/{len(tasks)} tasks completed"
