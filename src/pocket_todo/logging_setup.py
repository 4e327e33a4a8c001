# src/pocket_todo/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "pocket_todo.log"

# Loggers that run on the background loop thread and would interleave with the prompt.
_BACKGROUND_LOGGERS = (
    "pocket_todo.widgets.stopwatch",
    "pocket_todo.connectors.background_loop",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    The console shares the terminal with the task list and the input prompt:
    - pocket_todo records pass
    - background-thread loggers (stopwatch ticks, loop lifecycle) only at WARNING+
    - everything else, captured warnings included, only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith(_BACKGROUND_LOGGERS):
            return record.levelno >= logging.WARNING

        if name.startswith("pocket_todo."):
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/pocket_todo",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure logging and return the path of the log file.

    - Console (stderr): short lines, no timestamp, filtered.
    - File: everything at file_level, with the thread name so stopwatch ticks
      from the loop thread can be told apart from REPL commands.

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)-7s [%(threadName)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

    return log_file
