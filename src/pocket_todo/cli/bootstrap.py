# src/pocket_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the storage backend, task store and widgets into AppState,
- restores the saved task list (the only load of the session).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStore
from ..core.state import AppState
from ..storage.kv_store import create_kv_store
from ..tasks.task_store import TaskStore
from ..widgets.stopwatch import Stopwatch

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, kv: KeyValueStore | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the storage backend) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if kv is None:
        kv = create_kv_store(settings)

    task_store = TaskStore(kv, key=getattr(settings, "storage_key", "todos"))
    task_store.load()

    state = AppState(
        settings=settings,
        task_store=task_store,
        stopwatch=Stopwatch(interval_seconds=getattr(settings, "stopwatch_interval", 1.0)),
    )
    logger.info("State ready: %d tasks, storage=%s", len(task_store), kv.describe())
    return state
