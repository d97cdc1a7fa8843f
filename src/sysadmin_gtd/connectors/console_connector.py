# src/sysadmin_gtd/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..cli.report import format_table
from ..core.controller import CONFIRM_MODES, FORM_MODES, DayController, Mode

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], str]
Write = Callable[[str], None]

CURSOR = "> "
NO_CURSOR = "  "


def render_view(controller: DayController, write: Write) -> None:
    """Draw the day view: heading, task table with cursor, summary/hint, status."""
    write("")
    write(controller.heading)
    write("")

    if controller.tasks:
        header, *rows = format_table(controller.tasks)
        write(NO_CURSOR + header)
        for i, row in enumerate(rows):
            write((CURSOR if i == controller.cursor else NO_CURSOR) + row)
        write("")
        write(controller.summary)
    else:
        write(controller.hint)

    if controller.status:
        write(f"[{controller.status}]")


def _run_form(controller: DayController, read_line: ReadLine, write: Write) -> None:
    while controller.mode in FORM_MODES and controller.form is not None:
        form = controller.form
        write(f"-- {form.title} (Ctrl-C to cancel)")

        values: dict[str, str] = {}
        for spec in form.fields:
            for label, value in spec.choices:
                write(f"   {value}) {label}")
            current = form.values.get(spec.name, "")
            prompt = f"{spec.title} [{current}]: " if current else f"{spec.title}: "
            values[spec.name] = read_line(prompt).strip() or current

        controller.submit(values)
        if controller.mode in FORM_MODES and form.error:
            write(f"! {form.error}")


def _run_confirm(controller: DayController, read_line: ReadLine, write: Write) -> None:
    if controller.mode is Mode.CONFIRM_CARRY:
        for t in controller.carry_candidates:
            write(f"   [{t.priority.value}] {t.description} ({t.time_estimate})")
    answer = read_line(f"{controller.status} [y/N] ").strip().lower()
    controller.confirm(answer in ("y", "yes"))


def run_console_loop(
    controller: DayController,
    *,
    read_line: ReadLine | None = None,
    write: Write | None = None,
) -> None:
    read_line = read_line or input
    write = write or print

    logger.info("Console connector started date=%s context=%s.", controller.date, controller.context)
    write("Type ? for commands, q to quit.")

    while not controller.finished:
        render_view(controller, write)
        try:
            line = read_line("> ")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        key = line.strip()
        if key.isdigit():
            controller.select(int(key) - 1)
            continue

        try:
            reply = command_registry.handle(controller, key)
            if reply:
                write(reply)
            if controller.mode in FORM_MODES:
                _run_form(controller, read_line, write)
            elif controller.mode in CONFIRM_MODES:
                _run_confirm(controller, read_line, write)
        except (EOFError, KeyboardInterrupt):
            # Escape out of a form: a control-flow no-op, not an error.
            if controller.mode in FORM_MODES or controller.mode in CONFIRM_MODES:
                controller.cancel()
            write("")
        except Exception:
            logger.exception("Command handler crashed.")
            controller.status = "Internal error while handling a command."

    logger.info("Console connector finished.")
