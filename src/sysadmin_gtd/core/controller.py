# src/sysadmin_gtd/core/controller.py

"""
Interaction controller for one day view.

An explicit state machine: every legal (mode, command) pair is listed in one
transition table at the bottom of this module. Anything not in the table is
a no-op that only sets an informational status message.

The controller owns no persisted state. `tasks` and `cursor` are a read
cache rebuilt from the store after every mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import StrEnum

from ..dates import format_heading, next_day, previous_day, to_user_date, today_iso
from ..errors import NotFoundError, StorageError, ValidationError
from ..tasks.task_models import DEFAULT_CONTEXT, Priority, Task, completion_summary
from .forms import Form, add_task_form, edit_task_form, view_date_form
from .ports import TaskRepo

logger = logging.getLogger(__name__)


class Mode(StrEnum):
    BROWSING = "browsing"
    ADD_FORM = "add_form"
    EDIT_FORM = "edit_form"
    CONFIRM_DELETE = "confirm_delete"
    CONFIRM_CARRY = "confirm_carry"
    VIEW_DATE_FORM = "view_date_form"
    QUIT = "quit"  # terminal


class Command(StrEnum):
    ADD = "add"
    TOGGLE_DONE = "toggle_done"
    EDIT = "edit"
    DELETE = "delete"
    CARRY = "carry"
    VIEW_DATE = "view_date"
    IMPORT = "import"
    QUIT = "quit"
    CANCEL = "cancel"

    UP = "up"
    DOWN = "down"
    PREV_DAY = "prev_day"
    NEXT_DAY = "next_day"
    TODAY = "today"


FORM_MODES = frozenset({Mode.ADD_FORM, Mode.EDIT_FORM, Mode.VIEW_DATE_FORM})
CONFIRM_MODES = frozenset({Mode.CONFIRM_DELETE, Mode.CONFIRM_CARRY})


class DayController:
    def __init__(self, store: TaskRepo, date: str, context: str = DEFAULT_CONTEXT) -> None:
        self._store = store
        self.date = date
        self.context = context

        self.mode = Mode.BROWSING
        self.tasks: list[Task] = []
        self.cursor = 0
        self.status = ""
        self.latest_incomplete_date: str | None = None

        self.form: Form | None = None
        self.carry_candidates: list[Task] = []
        self._target_id: int | None = None

        self.refresh()

    # ---- view data ----

    @property
    def finished(self) -> bool:
        return self.mode is Mode.QUIT

    @property
    def selected_task(self) -> Task | None:
        if 0 <= self.cursor < len(self.tasks):
            return self.tasks[self.cursor]
        return None

    @property
    def heading(self) -> str:
        heading = format_heading(self.date)
        if self.context != DEFAULT_CONTEXT:
            heading = f"{heading} [{self.context}]"
        return heading

    @property
    def summary(self) -> str:
        return completion_summary(self.tasks) if self.tasks else ""

    @property
    def hint(self) -> str:
        """One-line hint for an empty day."""
        if self.tasks:
            return ""
        if self.latest_incomplete_date:
            return (
                "No tasks for this day. Open tasks remain on "
                f"{to_user_date(self.latest_incomplete_date)}; import them to start."
            )
        return "No tasks for this day."

    # ---- entry points ----

    def dispatch(self, command: Command | str) -> Mode:
        """Apply a command from the current mode; return the resulting mode."""
        try:
            cmd = Command(command)
        except ValueError:
            self.status = f"Unknown command: {command}"
            return self.mode

        handler = _TRANSITIONS.get((self.mode, cmd))
        if handler is None:
            if self.mode in FORM_MODES or self.mode in CONFIRM_MODES:
                self.status = "Finish or cancel the current form first."
            else:
                self.status = f"'{cmd.value}' is not available right now."
            return self.mode

        logger.debug("dispatch mode=%s command=%s", self.mode, cmd)
        handler(self)
        return self.mode

    def submit(self, values: Mapping[str, str] | None = None) -> Mode:
        """
        Complete the open form.

        Invalid input keeps the form open with `form.error` set; the store is
        not called.
        """
        handler = _SUBMITTERS.get(self.mode)
        if handler is None or self.form is None:
            self.status = "No form is open."
            return self.mode
        try:
            cleaned = self.form.validate(values)
        except ValidationError as e:
            self.status = str(e)
            return self.mode
        handler(self, cleaned)
        return self.mode

    def confirm(self, answer: bool) -> Mode:
        handler = _CONFIRMERS.get(self.mode)
        if handler is None:
            self.status = "Nothing to confirm."
            return self.mode
        if not answer:
            what = "Delete" if self.mode is Mode.CONFIRM_DELETE else "Carry over"
            self._to_browsing(f"{what} cancelled.")
            return self.mode
        handler(self)
        return self.mode

    def cancel(self) -> Mode:
        return self.dispatch(Command.CANCEL)

    def select(self, index: int) -> None:
        if self.mode is Mode.BROWSING:
            self.cursor = index
            self._clamp_cursor()

    # ---- store sync ----

    def refresh(self) -> bool:
        """
        Re-read the day view. On a storage failure the previous view is kept
        and the error is reported through `status`.
        """
        try:
            tasks = self._store.get_tasks_for_date(self.date, self.context)
            latest = None
            if not tasks:
                latest = self._store.get_latest_date_with_incomplete_tasks(self.date, self.context)
        except StorageError as e:
            logger.warning("Refresh failed date=%s context=%s: %s", self.date, self.context, e)
            self.status = f"Could not load tasks: {e}"
            return False

        self.tasks = tasks
        self.latest_incomplete_date = latest
        self._clamp_cursor()
        return True

    def _clamp_cursor(self) -> None:
        if not self.tasks:
            self.cursor = 0
        else:
            self.cursor = max(0, min(self.cursor, len(self.tasks) - 1))

    def _to_browsing(self, status: str | None = None) -> None:
        self.mode = Mode.BROWSING
        self.form = None
        self.carry_candidates = []
        self._target_id = None
        if status is not None:
            self.status = status

    def _write(self, action: Callable[[], object], success: str) -> bool:
        """
        Run one store mutation, then return to browsing and refresh.

        Failed writes are reported and never assumed to have applied.
        """
        try:
            action()
        except NotFoundError as e:
            logger.info("Write skipped: %s", e)
            self._to_browsing("That task no longer exists.")
            self.refresh()
            return False
        except StorageError as e:
            logger.warning("Write failed: %s", e)
            self._to_browsing(f"Error: {e}")
            if not self.refresh():
                # keep the write failure visible over the read failure
                self.status = f"Error: {e}"
            return False

        self._to_browsing(success)
        self.refresh()
        return True

    def _switch_date(self, new_date: str) -> bool:
        old_date, old_cursor = self.date, self.cursor
        self.date = new_date
        self.cursor = 0
        if not self.refresh():
            self.date, self.cursor = old_date, old_cursor
            return False
        return True

    # ---- browsing handlers ----

    def _begin_add(self) -> None:
        self.form = add_task_form()
        self.mode = Mode.ADD_FORM
        self.status = ""

    def _toggle_done(self) -> None:
        task = self.selected_task
        if task is None:
            self.status = "No task selected."
            return
        if task.is_completed:
            self._write(lambda: self._store.mark_incomplete(task.id), f"Marked not done: {task.description}")
        else:
            self._write(lambda: self._store.mark_complete(task.id), f"Marked done: {task.description}")

    def _begin_edit(self) -> None:
        task = self.selected_task
        if task is None:
            self.status = "No task selected."
            return
        self.form = edit_task_form(task)
        self._target_id = task.id
        self.mode = Mode.EDIT_FORM
        self.status = ""

    def _begin_delete(self) -> None:
        task = self.selected_task
        if task is None:
            self.status = "No task selected."
            return
        self._target_id = task.id
        self.mode = Mode.CONFIRM_DELETE
        self.status = f"Delete '{task.description}'?"

    def _begin_carry(self) -> None:
        try:
            tomorrow = next_day(self.date)
        except ValidationError as e:
            self.status = str(e)
            return
        try:
            candidates = self._store.get_carry_over_candidates(self.date, tomorrow, self.context)
        except StorageError as e:
            self.status = f"Could not load carry-over candidates: {e}"
            return

        if not candidates:
            if any(not t.is_completed for t in self.tasks):
                self.status = f"All incomplete tasks are already carried over to {to_user_date(tomorrow)}."
            else:
                self.status = "Nothing to carry over: no incomplete tasks."
            return

        self.carry_candidates = candidates
        self.mode = Mode.CONFIRM_CARRY
        self.status = f"Carry {len(candidates)} task(s) over to {to_user_date(tomorrow)}?"

    def _begin_view_date(self) -> None:
        self.form = view_date_form()
        self.mode = Mode.VIEW_DATE_FORM
        self.status = ""

    def _import(self) -> None:
        source = self.latest_incomplete_date
        if self.tasks or not source:
            self.status = "Import is only available on an empty day with earlier open tasks."
            return
        n = 0

        def run() -> None:
            nonlocal n
            n = self._store.copy_incomplete_tasks(source, self.date, self.context)

        if self._write(run, ""):
            self.status = f"Imported {n} task(s) from {to_user_date(source)}."

    def _quit(self) -> None:
        self._to_browsing()
        self.mode = Mode.QUIT

    def _cancel(self) -> None:
        self._to_browsing("Cancelled.")

    def _cursor_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def _cursor_down(self) -> None:
        if self.cursor < len(self.tasks) - 1:
            self.cursor += 1

    def _step_day(self, shift: Callable[[str], str]) -> None:
        try:
            new_date = shift(self.date)
        except ValidationError as e:
            self.status = str(e)
            return
        if self._switch_date(new_date):
            self.status = ""

    def _prev_day(self) -> None:
        self._step_day(previous_day)

    def _next_day(self) -> None:
        self._step_day(next_day)

    def _today(self) -> None:
        if self._switch_date(today_iso()):
            self.status = ""

    # ---- form completion ----

    def _submit_add(self, values: dict[str, str]) -> None:
        self._write(
            lambda: self._store.add_task(
                self.date,
                values["description"],
                Priority(values["priority"]),
                values["time_estimate"],
                self.context,
            ),
            f"Added: {values['description']}",
        )

    def _submit_edit(self, values: dict[str, str]) -> None:
        task_id = self._target_id
        if task_id is None:
            self._to_browsing("No task selected.")
            return
        self._write(
            lambda: self._store.update_task(
                task_id,
                values["description"],
                Priority(values["priority"]),
                values["time_estimate"],
            ),
            "Task updated.",
        )

    def _submit_view_date(self, values: dict[str, str]) -> None:
        new_date = values["date"]
        self._to_browsing()
        if self._switch_date(new_date):
            self.status = f"Viewing {to_user_date(new_date)}."

    def _confirm_delete(self) -> None:
        task_id = self._target_id
        if task_id is None:
            self._to_browsing("No task selected.")
            return
        self._write(lambda: self._store.delete_task(task_id), "Task deleted.")

    def _confirm_carry(self) -> None:
        candidates = list(self.carry_candidates)
        tomorrow = next_day(self.date)
        self._write(
            lambda: self._store.carry_over_tasks(candidates, tomorrow, self.context),
            f"Carried over {len(candidates)} task(s) to {to_user_date(tomorrow)}.",
        )


_Handler = Callable[[DayController], None]

_TRANSITIONS: dict[tuple[Mode, Command], _Handler] = {
    (Mode.BROWSING, Command.ADD): DayController._begin_add,
    (Mode.BROWSING, Command.TOGGLE_DONE): DayController._toggle_done,
    (Mode.BROWSING, Command.EDIT): DayController._begin_edit,
    (Mode.BROWSING, Command.DELETE): DayController._begin_delete,
    (Mode.BROWSING, Command.CARRY): DayController._begin_carry,
    (Mode.BROWSING, Command.VIEW_DATE): DayController._begin_view_date,
    (Mode.BROWSING, Command.IMPORT): DayController._import,
    (Mode.BROWSING, Command.QUIT): DayController._quit,
    (Mode.BROWSING, Command.UP): DayController._cursor_up,
    (Mode.BROWSING, Command.DOWN): DayController._cursor_down,
    (Mode.BROWSING, Command.PREV_DAY): DayController._prev_day,
    (Mode.BROWSING, Command.NEXT_DAY): DayController._next_day,
    (Mode.BROWSING, Command.TODAY): DayController._today,
    (Mode.ADD_FORM, Command.CANCEL): DayController._cancel,
    (Mode.EDIT_FORM, Command.CANCEL): DayController._cancel,
    (Mode.VIEW_DATE_FORM, Command.CANCEL): DayController._cancel,
    (Mode.CONFIRM_DELETE, Command.CANCEL): DayController._cancel,
    (Mode.CONFIRM_CARRY, Command.CANCEL): DayController._cancel,
}

_SUBMITTERS: dict[Mode, Callable[[DayController, dict[str, str]], None]] = {
    Mode.ADD_FORM: DayController._submit_add,
    Mode.EDIT_FORM: DayController._submit_edit,
    Mode.VIEW_DATE_FORM: DayController._submit_view_date,
}

_CONFIRMERS: dict[Mode, _Handler] = {
    Mode.CONFIRM_DELETE: DayController._confirm_delete,
    Mode.CONFIRM_CARRY: DayController._confirm_carry,
}
