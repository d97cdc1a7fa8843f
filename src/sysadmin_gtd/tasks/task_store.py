# src/sysadmin_gtd/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterable, Iterator
from pathlib import Path

from ..errors import NotFoundError, StorageError, ValidationError
from .task_models import DEFAULT_CONTEXT, Priority, Task

logger = logging.getLogger(__name__)

MEMORY_DSN = ":memory:"

_COLUMNS = "id, date, context, description, priority, time_estimate, is_completed, carried_from_id"


@contextlib.contextmanager
def _storage_errors(op: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as e:
        logger.error("TaskStore %s failed: %s", op, e)
        raise StorageError(f"{op} failed: {e}") from e


def _require_text(value: str, field: str, label: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{label} is required", field=field)
    return value


class TaskStore:
    """
    SQLite task store, partitioned by (date, context).

    Resource model:
    - one connection, opened in __init__ and released by close()
    - usable as a context manager so callers get guaranteed release

    Every mutating method runs in its own transaction: it either fully
    applies or leaves the database unchanged.

    carried_from_id is declared as a reference to tasks(id) but foreign keys
    are not enforced: deleting a carried-over source leaves the copy's
    back-reference dangling.
    """

    def __init__(self, db_path: str | Path = MEMORY_DSN) -> None:
        dsn = str(db_path)
        if dsn != MEMORY_DSN:
            try:
                Path(dsn).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error("TaskStore open failed: %s", e)
                raise StorageError(f"open failed: {e}") from e
        self._db_path = dsn

        with _storage_errors("open"):
            self._conn = sqlite3.connect(dsn, timeout=30.0)
            self._conn.row_factory = sqlite3.Row
            self._configure_conn(self._conn)
            self._ensure_schema()

        try:
            total = self.count_tasks()
        except StorageError:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        with _storage_errors("close"):
            self._conn.close()
        logger.debug("TaskStore closed db=%s", self._db_path)

    def __enter__(self) -> TaskStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        with self._conn:
            cur = self._conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id              INTEGER PRIMARY KEY AUTOINCREMENT,
                    date            TEXT    NOT NULL,
                    context         TEXT    NOT NULL DEFAULT 'default',
                    description     TEXT    NOT NULL,
                    priority        TEXT    NOT NULL DEFAULT 'B',
                    time_estimate   TEXT    NOT NULL DEFAULT '',
                    is_completed    INTEGER NOT NULL DEFAULT 0,
                    carried_from_id INTEGER REFERENCES tasks(id)
                )
                """
            )

            # Databases created before contexts existed lack the column.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}
            if "context" not in cols:
                cur.execute(
                    f"ALTER TABLE tasks ADD COLUMN context TEXT NOT NULL DEFAULT '{DEFAULT_CONTEXT}'"
                )
                logger.info("TaskStore migration: added column context")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_context_date ON tasks(context, date)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_carried_from ON tasks(carried_from_id)")

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            date=str(row["date"]),
            context=str(row["context"] or DEFAULT_CONTEXT),
            description=str(row["description"] or ""),
            priority=Priority.from_db(row["priority"]),
            time_estimate=str(row["time_estimate"] or ""),
            is_completed=bool(row["is_completed"]),
            carried_from_id=int(row["carried_from_id"]) if row["carried_from_id"] is not None else None,
        )

    def _exec_for_id(self, op: str, sql: str, params: tuple, task_id: int) -> None:
        with _storage_errors(op), self._conn:
            cur = self._conn.execute(sql, params)
            if cur.rowcount == 0:
                raise NotFoundError(task_id)

    def _candidates(self, from_date: str, to_date: str, context: str) -> list[Task]:
        cur = self._conn.execute(
            f"""
            SELECT {_COLUMNS}
            FROM tasks
            WHERE date = ?
              AND context = ?
              AND is_completed = 0
              AND id NOT IN (
                SELECT carried_from_id
                FROM tasks
                WHERE date = ? AND context = ? AND carried_from_id IS NOT NULL
              )
            ORDER BY priority, id
            """,
            (from_date, context, to_date, context),
        )
        return [self._row_to_task(r) for r in cur.fetchall()]

    def _insert_copies(self, tasks: Iterable[Task], to_date: str, context: str) -> int:
        n = 0
        for t in tasks:
            self._conn.execute(
                """
                INSERT INTO tasks(date, context, description, priority, time_estimate,
                                  is_completed, carried_from_id)
                VALUES (?, ?, ?, ?, ?, 0, ?)
                """,
                (to_date, context, t.description, Priority(t.priority).value, t.time_estimate, int(t.id)),
            )
            n += 1
        return n

    # ---- public API ----

    def count_tasks(self) -> int:
        with _storage_errors("count_tasks"):
            (n,) = self._conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def get_tasks_for_date(self, date: str, context: str = DEFAULT_CONTEXT) -> list[Task]:
        """Day view: tasks for (date, context) ordered by priority, then id."""
        with _storage_errors("get_tasks_for_date"):
            cur = self._conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE date = ? AND context = ? ORDER BY priority, id",
                (date, context),
            )
            return [self._row_to_task(r) for r in cur.fetchall()]

    def get_task(self, task_id: int) -> Task:
        with _storage_errors("get_task"):
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (int(task_id),)
            ).fetchone()
        if row is None:
            raise NotFoundError(task_id)
        return self._row_to_task(row)

    def add_task(
        self,
        date: str,
        description: str,
        priority: Priority = Priority.B,
        time_estimate: str = "",
        context: str = DEFAULT_CONTEXT,
    ) -> int:
        description = _require_text(description, "description", "Description")
        time_estimate = _require_text(time_estimate, "time_estimate", "Time estimate")

        with _storage_errors("add_task"), self._conn:
            cur = self._conn.execute(
                "INSERT INTO tasks(date, context, description, priority, time_estimate) "
                "VALUES (?, ?, ?, ?, ?)",
                (date, context, description, Priority(priority).value, time_estimate),
            )
            rowid = cur.lastrowid
        if rowid is None:
            raise StorageError("SQLite did not return lastrowid for tasks insert")
        task_id = int(rowid)
        logger.debug("Task added id=%s date=%s context=%s priority=%s", task_id, date, context, priority)
        return task_id

    def update_task(
        self,
        task_id: int,
        description: str,
        priority: Priority,
        time_estimate: str,
    ) -> None:
        description = _require_text(description, "description", "Description")
        time_estimate = _require_text(time_estimate, "time_estimate", "Time estimate")
        self._exec_for_id(
            "update_task",
            "UPDATE tasks SET description = ?, priority = ?, time_estimate = ? WHERE id = ?",
            (description, Priority(priority).value, time_estimate, int(task_id)),
            task_id,
        )
        logger.debug("Task updated id=%s", task_id)

    def delete_task(self, task_id: int) -> None:
        self._exec_for_id("delete_task", "DELETE FROM tasks WHERE id = ?", (int(task_id),), task_id)
        logger.debug("Task deleted id=%s", task_id)

    def mark_complete(self, task_id: int) -> None:
        # rowcount counts matched rows, so an already-complete task is a silent no-op.
        self._exec_for_id(
            "mark_complete", "UPDATE tasks SET is_completed = 1 WHERE id = ?", (int(task_id),), task_id
        )

    def mark_incomplete(self, task_id: int) -> None:
        self._exec_for_id(
            "mark_incomplete", "UPDATE tasks SET is_completed = 0 WHERE id = ?", (int(task_id),), task_id
        )

    def get_carry_over_candidates(
        self, from_date: str, to_date: str, context: str = DEFAULT_CONTEXT
    ) -> list[Task]:
        """
        Incomplete tasks on from_date that have not already been carried to to_date.

        Running carry-over twice for the same day pair yields an empty list
        the second time.
        """
        with _storage_errors("get_carry_over_candidates"):
            return self._candidates(from_date, to_date, context)

    def carry_over_tasks(self, tasks: Iterable[Task], to_date: str, context: str = DEFAULT_CONTEXT) -> int:
        """
        Copy tasks to to_date with carried_from_id pointing at each source.

        All rows are inserted in one transaction. Sources are left untouched.
        """
        tasks = list(tasks)
        if not tasks:
            return 0
        with _storage_errors("carry_over_tasks"), self._conn:
            n = self._insert_copies(tasks, to_date, context)
        logger.info("Carried over %d task(s) to %s context=%s", n, to_date, context)
        return n

    def get_latest_date_with_incomplete_tasks(
        self, before_date: str, context: str = DEFAULT_CONTEXT
    ) -> str | None:
        """Most recent date strictly before before_date with an incomplete task, or None."""
        with _storage_errors("get_latest_date_with_incomplete_tasks"):
            (latest,) = self._conn.execute(
                """
                SELECT MAX(date)
                FROM tasks
                WHERE context = ? AND date < ? AND is_completed = 0
                """,
                (context, before_date),
            ).fetchone()
        return str(latest) if latest is not None else None

    def copy_incomplete_tasks(self, from_date: str, to_date: str, context: str = DEFAULT_CONTEXT) -> int:
        """
        Import every open task from from_date into to_date.

        Shares carry-over semantics: copies keep a back-reference to their
        source and tasks already copied to to_date are skipped, so repeating
        the import creates nothing new.
        """
        with _storage_errors("copy_incomplete_tasks"), self._conn:
            n = self._insert_copies(self._candidates(from_date, to_date, context), to_date, context)
        logger.info("Imported %d task(s) from %s to %s context=%s", n, from_date, to_date, context)
        return n
