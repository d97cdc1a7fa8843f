# tests/test_controller.py

from __future__ import annotations

from sysadmin_gtd.core.controller import Command, DayController, Mode
from sysadmin_gtd.tasks.task_models import Priority
from sysadmin_gtd.tasks.task_store import TaskStore

from .fakes import FakeTaskRepo

DAY = "2025-06-01"


def _add(controller: DayController, description: str, priority: str = "B", estimate: str = "1h") -> None:
    assert controller.dispatch(Command.ADD) is Mode.ADD_FORM
    controller.submit({"description": description, "priority": priority, "time_estimate": estimate})


def test_starts_browsing_empty_day(controller: DayController) -> None:
    assert controller.mode is Mode.BROWSING
    assert controller.tasks == []
    assert controller.cursor == 0
    assert controller.selected_task is None
    assert controller.hint == "No tasks for this day."
    assert controller.heading == "Sunday 01 June 2025"


def test_add_task_through_form(controller: DayController, store: TaskStore) -> None:
    controller.dispatch(Command.ADD)
    assert controller.form is not None
    assert controller.form.values["priority"] == "B"

    controller.submit({"description": "Fix server", "priority": "A", "time_estimate": "2h"})

    assert controller.mode is Mode.BROWSING
    assert controller.form is None
    assert [t.description for t in controller.tasks] == ["Fix server"]
    assert store.get_tasks_for_date(DAY, "default")[0].priority is Priority.A
    assert controller.status == "Added: Fix server"


def test_invalid_form_stays_open_and_never_reaches_store() -> None:
    repo = FakeTaskRepo()
    controller = DayController(repo, date=DAY)
    controller.dispatch(Command.ADD)

    controller.submit({"description": "", "time_estimate": "1h"})

    assert controller.mode is Mode.ADD_FORM
    assert controller.form is not None
    assert controller.form.error == "Description is required"
    assert "add_task" not in repo.calls


def test_cancel_discards_form(controller: DayController, store: TaskStore) -> None:
    controller.dispatch(Command.ADD)
    controller.cancel()

    assert controller.mode is Mode.BROWSING
    assert controller.form is None
    assert store.count_tasks() == 0


def test_toggle_done_flips_state(controller: DayController, store: TaskStore) -> None:
    _add(controller, "Buy milk")

    controller.dispatch(Command.TOGGLE_DONE)
    assert controller.tasks[0].is_completed
    assert controller.summary == "1/1 tasks completed"

    controller.dispatch(Command.TOGGLE_DONE)
    assert not controller.tasks[0].is_completed


def test_commands_needing_selection_are_no_ops_on_empty_day(controller: DayController) -> None:
    for cmd in (Command.TOGGLE_DONE, Command.EDIT, Command.DELETE):
        assert controller.dispatch(cmd) is Mode.BROWSING
        assert controller.status == "No task selected."


def test_edit_is_prefilled_and_updates(controller: DayController) -> None:
    _add(controller, "Draft", "C", "20m")

    controller.dispatch(Command.EDIT)
    assert controller.mode is Mode.EDIT_FORM
    assert controller.form is not None
    assert controller.form.values["description"] == "Draft"

    controller.submit({"description": "Final"})

    assert controller.mode is Mode.BROWSING
    (task,) = controller.tasks
    assert task.description == "Final"
    assert task.priority is Priority.C
    assert task.time_estimate == "20m"


def test_delete_requires_confirmation(controller: DayController) -> None:
    _add(controller, "Keep me")

    controller.dispatch(Command.DELETE)
    assert controller.mode is Mode.CONFIRM_DELETE
    controller.confirm(False)
    assert controller.mode is Mode.BROWSING
    assert len(controller.tasks) == 1

    controller.dispatch(Command.DELETE)
    controller.confirm(True)
    assert controller.tasks == []
    assert controller.status == "Task deleted."


def test_cursor_is_clamped_after_delete(controller: DayController) -> None:
    for name in ("one", "two", "three"):
        _add(controller, name)
    controller.select(2)
    assert controller.selected_task is not None
    assert controller.selected_task.description == "three"

    controller.dispatch(Command.DELETE)
    controller.confirm(True)

    assert controller.cursor == 1
    assert controller.selected_task.description == "two"


def test_cursor_position_is_kept_after_toggle(controller: DayController) -> None:
    for name in ("one", "two", "three"):
        _add(controller, name)
    controller.dispatch(Command.DOWN)
    controller.dispatch(Command.TOGGLE_DONE)
    assert controller.cursor == 1


def test_cursor_movement_bounds(controller: DayController) -> None:
    _add(controller, "one")
    _add(controller, "two")
    controller.dispatch(Command.UP)
    assert controller.cursor == 0
    controller.dispatch(Command.DOWN)
    controller.dispatch(Command.DOWN)
    assert controller.cursor == 1


def test_carry_with_nothing_incomplete(controller: DayController) -> None:
    assert controller.dispatch(Command.CARRY) is Mode.BROWSING
    assert controller.status == "Nothing to carry over: no incomplete tasks."

    _add(controller, "done already")
    controller.dispatch(Command.TOGGLE_DONE)
    controller.dispatch(Command.CARRY)
    assert controller.status == "Nothing to carry over: no incomplete tasks."


def test_carry_confirm_then_already_carried(controller: DayController, store: TaskStore) -> None:
    _add(controller, "Open one", "A")
    _add(controller, "Open two", "B")

    assert controller.dispatch(Command.CARRY) is Mode.CONFIRM_CARRY
    assert [t.description for t in controller.carry_candidates] == ["Open one", "Open two"]

    controller.confirm(True)

    assert controller.mode is Mode.BROWSING
    assert controller.status == "Carried over 2 task(s) to 02/06/2025."
    tomorrow = store.get_tasks_for_date("2025-06-02", "default")
    assert all(t.was_carried_over for t in tomorrow)
    assert len(controller.tasks) == 2

    controller.dispatch(Command.CARRY)
    assert controller.mode is Mode.BROWSING
    assert controller.status == "All incomplete tasks are already carried over to 02/06/2025."


def test_view_date_switches_day_or_shows_inline_error(controller: DayController) -> None:
    controller.dispatch(Command.VIEW_DATE)
    assert controller.mode is Mode.VIEW_DATE_FORM

    controller.submit({"date": "not-a-date"})
    assert controller.mode is Mode.VIEW_DATE_FORM
    assert controller.form is not None
    assert "dd/mm/yyyy" in (controller.form.error or "")
    assert controller.date == DAY

    controller.submit({"date": "14/02/2026"})
    assert controller.mode is Mode.BROWSING
    assert controller.date == "2026-02-14"


def test_day_navigation(controller: DayController) -> None:
    controller.dispatch(Command.NEXT_DAY)
    assert controller.date == "2025-06-02"
    controller.dispatch(Command.PREV_DAY)
    controller.dispatch(Command.PREV_DAY)
    assert controller.date == "2025-05-31"


def test_import_from_latest_incomplete_day(store: TaskStore) -> None:
    store.add_task("2025-01-10", "Task A", Priority.A, "1h")
    b_id = store.add_task("2025-01-10", "Task B", Priority.B, "1h")
    store.mark_complete(b_id)

    controller = DayController(store, date="2025-01-20")
    assert controller.latest_incomplete_date == "2025-01-10"
    assert "10/01/2025" in controller.hint

    controller.dispatch(Command.IMPORT)

    assert [t.description for t in controller.tasks] == ["Task A"]
    assert not controller.tasks[0].is_completed
    assert controller.status == "Imported 1 task(s) from 10/01/2025."
    assert controller.hint == ""

    controller.dispatch(Command.IMPORT)
    assert controller.status == "Import is only available on an empty day with earlier open tasks."
    assert len(controller.tasks) == 1


def test_import_without_prior_open_day_is_a_no_op(controller: DayController) -> None:
    controller.dispatch(Command.IMPORT)
    assert controller.tasks == []
    assert controller.status.startswith("Import is only available")


def test_context_is_respected(store: TaskStore) -> None:
    store.add_task(DAY, "Work only", Priority.A, "1h", "work")
    personal = DayController(store, date=DAY, context="personal")
    assert personal.tasks == []
    assert personal.heading.endswith("[personal]")

    work = DayController(store, date=DAY, context="work")
    assert [t.description for t in work.tasks] == ["Work only"]


def test_commands_blocked_while_form_open(controller: DayController) -> None:
    controller.dispatch(Command.ADD)
    assert controller.dispatch(Command.DELETE) is Mode.ADD_FORM
    assert controller.status == "Finish or cancel the current form first."


def test_unknown_command_and_quit(controller: DayController) -> None:
    controller.dispatch("fly")
    assert controller.status == "Unknown command: fly"
    assert not controller.finished

    assert controller.dispatch(Command.QUIT) is Mode.QUIT
    assert controller.finished


def test_read_failure_keeps_previous_view() -> None:
    repo = FakeTaskRepo()
    controller = DayController(repo, date=DAY)
    _add(controller, "Visible")

    repo.fail_reads = True
    controller.dispatch(Command.NEXT_DAY)

    assert controller.date == DAY
    assert [t.description for t in controller.tasks] == ["Visible"]
    assert controller.status.startswith("Could not load tasks:")


def test_write_failure_returns_to_browsing() -> None:
    repo = FakeTaskRepo()
    controller = DayController(repo, date=DAY)
    controller.dispatch(Command.ADD)

    repo.fail_writes = True
    controller.submit({"description": "Lost", "time_estimate": "1h"})

    assert controller.mode is Mode.BROWSING
    assert controller.form is None
    assert controller.status.startswith("Error:")
    assert controller.tasks == []


def test_task_deleted_elsewhere_is_reported() -> None:
    repo = FakeTaskRepo()
    controller = DayController(repo, date=DAY)
    _add(controller, "Ghost")

    repo.tasks.clear()
    controller.dispatch(Command.TOGGLE_DONE)

    assert controller.status == "That task no longer exists."
    assert controller.tasks == []


def test_write_error_survives_failed_refresh() -> None:
    repo = FakeTaskRepo()
    controller = DayController(repo, date=DAY)
    controller.dispatch(Command.ADD)

    repo.fail_writes = True
    repo.fail_reads = True
    controller.submit({"description": "Lost", "time_estimate": "1h"})

    assert controller.mode is Mode.BROWSING
    assert controller.status.startswith("Error: add_task")


def test_last_calendar_day_has_no_tomorrow(store: TaskStore) -> None:
    controller = DayController(store, date="9999-12-31")
    _add(controller, "End of time")

    assert controller.dispatch(Command.CARRY) is Mode.BROWSING
    assert controller.status == "No day after 31/12/9999."

    controller.dispatch(Command.NEXT_DAY)
    assert controller.date == "9999-12-31"
    assert controller.status == "No day after 31/12/9999."
    assert [t.description for t in controller.tasks] == ["End of time"]


def test_first_calendar_day_has_no_yesterday(store: TaskStore) -> None:
    controller = DayController(store, date="0001-01-01")

    assert controller.dispatch(Command.PREV_DAY) is Mode.BROWSING
    assert controller.date == "0001-01-01"
    assert controller.status == "No day before 01/01/0001."
