# src/pocket_todo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (restoring the saved list), starts the
background event loop for the stopwatch, then runs the console REPL in the
main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.background_loop import start_background_loop
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown: the stopwatch timer must not outlive the view."""
    runner = state.loop_runner
    if runner is None:
        return

    try:
        runner.run(state.stopwatch.aclose())
    except Exception:
        logger.exception("Failed to close stopwatch.")

    runner.stop()
    runner.join(timeout=5.0)
    state.loop_runner = None


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s... log=%s", settings.app_name, log_file)

    state = create_initial_state(settings=settings)
    state.loop_runner = start_background_loop()

    try:
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
