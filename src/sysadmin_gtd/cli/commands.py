# src/sysadmin_gtd/cli/commands.py

from __future__ import annotations

import logging

from ..core.controller import Command, DayController

logger = logging.getLogger(__name__)

HELP_KEYS = ("?", "h", "help")


class CommandRegistry:
    """Key -> controller command registry used by the console connector."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        key: str,
        command: Command,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        k = key.lower()
        self._commands[k] = command
        self._help[k] = help_text
        for alias in aliases:
            self._commands[alias.lower()] = command

    def resolve(self, line: str) -> Command | None:
        return self._commands.get(line.strip().lower())

    def handle(self, controller: DayController, line: str) -> str | None:
        """
        Handle one line typed in browsing mode.

        Returns text to show immediately (help, unknown key), or None when the
        line was dispatched and the controller status carries the outcome.
        """
        key = line.strip().lower()
        if not key:
            return None
        if key in HELP_KEYS:
            return self.build_help()

        command = self._commands.get(key)
        if command is None:
            return f"Unknown command: {key}. Use ? to list available commands."

        logger.debug("key=%s -> %s", key, command)
        controller.dispatch(command)
        return None

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for key, help_text in self._help.items():
            lines.append(f"  {key:<3} {help_text}")
        lines.append("  1.. select task by number")
        return "\n".join(lines)


registry = CommandRegistry()

registry.register("a", Command.ADD, "Add task", aliases=["add"])
registry.register("x", Command.TOGGLE_DONE, "Mark selected task done / not done", aliases=["done"])
registry.register("e", Command.EDIT, "Edit selected task", aliases=["edit"])
registry.register("d", Command.DELETE, "Delete selected task", aliases=["delete", "del"])
registry.register("c", Command.CARRY, "Carry incomplete tasks over to tomorrow", aliases=["carry"])
registry.register("v", Command.VIEW_DATE, "View another day", aliases=["view"])
registry.register("i", Command.IMPORT, "Import open tasks into an empty day", aliases=["import"])
registry.register("k", Command.UP, "Move selection up", aliases=["up"])
registry.register("j", Command.DOWN, "Move selection down", aliases=["down"])
registry.register("p", Command.PREV_DAY, "Previous day", aliases=["prev"])
registry.register("n", Command.NEXT_DAY, "Next day", aliases=["next"])
registry.register("t", Command.TODAY, "Jump to today", aliases=["today"])
registry.register("q", Command.QUIT, "Quit", aliases=["quit", "exit"])
