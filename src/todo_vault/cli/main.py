# src/todo_vault/cli/main.py

"""
CLI entrypoint.

Initializes logging, rebuilds the task store from its snapshot, runs the
console connector and writes the snapshot back on the way out.
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state, save_store_snapshot
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.task_snapshot import SnapshotCorruptError

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/todo_vault")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "todo-vault"))

    try:
        state = create_initial_state(settings=settings)
    except SnapshotCorruptError as e:
        logger.critical("Refusing to start: %s", e)
        raise SystemExit(2) from e

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()
        if settings.console_enabled:
            # The console sits in input() and never looks at stop_main.
            raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError):
        # Not on the main thread, or platform without SIGTERM.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled. Idle until SIGTERM/Ctrl+C.")
            stop_main.wait()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, shutting down...")
    finally:
        save_store_snapshot(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
