# src/sysadmin_gtd/cli/main.py

"""
CLI entrypoint.

Initializes logging, parses arguments, opens the store, then either prints
the day (`--print`) or starts the interactive console.
"""

from __future__ import annotations

import logging
import sys

from ..cli.args import parse_args
from ..cli.bootstrap import create_controller, open_store
from ..cli.report import print_tasks
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import TaskError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    args = parse_args(argv, default_context=settings.default_context)

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(
        log_dir=settings.data_dir,
        console_level=console_level,
        log_to_file=settings.log_to_file,
    )

    logger.info(
        "Starting %s date=%s context=%s print=%s",
        settings.app_name,
        args.date,
        args.context,
        args.print_mode,
    )

    try:
        with open_store(settings, db_path=args.db_path) as store:
            if args.print_mode:
                print_tasks(store, args.date, args.context)
                return 0

            controller = create_controller(store, date=args.date, context=args.context)
            run_console_loop(controller)
    except TaskError as e:
        logger.error("Fatal: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("See you later!")
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
