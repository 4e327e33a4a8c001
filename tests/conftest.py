# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from pocket_todo.connectors.background_loop import BackgroundLoop, start_background_loop
from pocket_todo.core.state import AppState
from pocket_todo.tasks.task_store import TaskStore
from pocket_todo.widgets.stopwatch import Stopwatch

from .fakes import RecordingKeyValueStore, sequential_ids


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="pocket-todo-test",
        log_level="WARNING",
        data_dir=tmp_path / "data",
        storage_backend="memory",
        db_path=tmp_path / "data" / "todos.sqlite3",
        json_path=tmp_path / "data" / "todos.json",
        storage_key="todos",
        stopwatch_interval=0.01,
    )


@pytest.fixture()
def kv() -> RecordingKeyValueStore:
    return RecordingKeyValueStore()


@pytest.fixture()
def store(kv: RecordingKeyValueStore) -> TaskStore:
    s = TaskStore(kv, id_factory=sequential_ids())
    s.load()
    return s


@pytest.fixture()
def loop_runner() -> Iterator[BackgroundLoop]:
    runner = start_background_loop(name="test-loop")
    try:
        yield runner
    finally:
        runner.stop()
        runner.join(timeout=5.0)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """AppState wired with an in-memory store; no event loop unless a test attaches one."""
    return AppState(
        settings=settings,
        task_store=store,
        stopwatch=Stopwatch(interval_seconds=settings.stopwatch_interval),
    )
