# src/sysadmin_gtd/cli/args.py

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

from ..dates import parse_user_date, today_iso
from ..errors import ValidationError
from ..tasks.task_models import DEFAULT_CONTEXT


@dataclass(frozen=True, slots=True)
class CliArgs:
    date: str  # yyyy-mm-dd
    print_mode: bool
    context: str
    db_path: Path | None = None


def build_parser(prog: str = "gtd") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Day-by-day task tracker. Browse a day, add tasks, carry open work forward.",
    )
    parser.add_argument("date", nargs="?", help="day to open, dd/mm/yyyy (default: today)")
    parser.add_argument("--print", dest="print_mode", action="store_true", help="print the day and exit")
    parser.add_argument("--context", help=f"task namespace, e.g. work or personal (default: {DEFAULT_CONTEXT})")
    parser.add_argument("--db", dest="db_path", type=Path, help="SQLite database path")
    return parser


def parse_args(argv: list[str] | None = None, *, default_context: str = DEFAULT_CONTEXT) -> CliArgs:
    """
    Parse command-line arguments. The date and the flags may appear in any
    order. Invalid input exits through argparse with status 2.
    """
    parser = build_parser()
    ns = parser.parse_args(argv)

    date = today_iso()
    if ns.date is not None:
        try:
            date = parse_user_date(ns.date)
        except ValidationError as e:
            parser.error(str(e))

    context = default_context
    if ns.context is not None:
        context = ns.context.strip()
        if not context:
            parser.error("--context requires a value")

    return CliArgs(date=date, print_mode=ns.print_mode, context=context, db_path=ns.db_path)
