# src/sysadmin_gtd/cli/report.py

"""
Non-interactive day report (`gtd --print`).

Reads the day view straight from the store; no controller involved.
"""

from __future__ import annotations

import sys
from typing import TextIO

from ..dates import format_heading
from ..tasks.task_models import Task, completion_summary

HEADERS = ("#", "Task", "Priority", "Time", "Done")
COLUMN_GAP = 2


def task_rows(tasks: list[Task]) -> list[tuple[str, ...]]:
    return [
        (str(i), t.display_description, t.priority.value, t.time_estimate, t.done_display)
        for i, t in enumerate(tasks, start=1)
    ]


def format_table(tasks: list[Task]) -> list[str]:
    rows = [HEADERS, *task_rows(tasks)]
    widths = [max(len(row[col]) for row in rows) for col in range(len(HEADERS))]
    lines = []
    for row in rows:
        cells = [cell.ljust(widths[col]) for col, cell in enumerate(row)]
        lines.append((" " * COLUMN_GAP).join(cells).rstrip())
    return lines


def print_tasks(store, date: str, context: str, out: TextIO | None = None) -> None:
    """Write the heading, the task table and the completion summary."""
    out = out or sys.stdout
    tasks = store.get_tasks_for_date(date, context)

    print(format_heading(date), file=out)
    print(file=out)

    if not tasks:
        print("No tasks for this day.", file=out)
        return

    for line in format_table(tasks):
        print(line, file=out)
    print(f"\n{completion_summary(tasks)}", file=out)
