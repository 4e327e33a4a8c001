# src/pocket_todo/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import REDRAW_AFTER, command_name, render_tasks
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _draw(state: AppState) -> None:
    title = str(getattr(state.settings, "app_name", "pocket-todo"))
    print(f"\n== {title} ==  [{state.stopwatch.format_elapsed()}]")
    print(render_tasks(state))
    print()


def run_console_loop(state: AppState) -> None:
    logger.info("Console started (%d tasks).", len(state.task_store))
    _print_ts("Type a task to add it. Use /help for commands. Use /exit to quit.")
    _draw(state)

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Bare text is shorthand for /add.
        line = user_input if user_input.startswith("/") else f"/add {user_input}"

        try:
            response = command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            _print_ts(response)

        if command_name(line) in REDRAW_AFTER:
            _draw(state)

    logger.info("Console finished.")
