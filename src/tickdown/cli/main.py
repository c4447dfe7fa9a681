# src/tickdown/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the task list, then runs the
console REPL while the countdown ticks in a background thread.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import close_remote, create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.errors import SyncError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    try:
        try:
            state.store.load()
        except SyncError as e:
            logger.error("Initial load failed: %s", e)
            print(f"Could not load tasks: {e}. Use /reload to retry.", file=sys.stderr)

        with state.countdown:
            run_console_loop(state)
    finally:
        close_remote(state)
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
