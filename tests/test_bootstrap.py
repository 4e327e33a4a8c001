# tests/test_bootstrap.py

from __future__ import annotations

import builtins
from collections.abc import Iterator
from types import SimpleNamespace

import pytest

from pocket_todo.cli.bootstrap import create_initial_state
from pocket_todo.cli.main import _shutdown
from pocket_todo.connectors.background_loop import start_background_loop
from pocket_todo.connectors.console_connector import run_console_loop
from pocket_todo.tasks.task_codec import encode_tasks
from pocket_todo.tasks.task_models import Task

from .fakes import FailingKeyValueStore, RecordingKeyValueStore


def _feed(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    it: Iterator[str] = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)


def test_create_initial_state_restores_saved_list(settings: SimpleNamespace) -> None:
    kv = RecordingKeyValueStore()
    kv.data["todos"] = encode_tasks([Task(id="a", task="saved", completed=True)])

    state = create_initial_state(settings=settings, kv=kv)

    assert settings.data_dir.is_dir()
    assert state.task_store.tasks == (Task(id="a", task="saved", completed=True),)
    assert state.stopwatch.interval_seconds == settings.stopwatch_interval
    assert state.text_color.value == "#000"
    assert kv.loads == 1


def test_create_initial_state_with_unreadable_storage(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings, kv=FailingKeyValueStore())
    assert state.task_store.tasks == ()


def test_create_initial_state_with_corrupt_sqlite_file(settings: SimpleNamespace) -> None:
    settings.storage_backend = "sqlite"
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.write_bytes(b"not a database " * 300)

    state = create_initial_state(settings=settings)

    assert state.task_store.tasks == ()
    task = state.task_store.add_task("still works")
    assert state.task_store.tasks == (task,)


def test_create_initial_state_uses_configured_backend(settings: SimpleNamespace) -> None:
    settings.storage_backend = "sqlite"
    state = create_initial_state(settings=settings)
    state.task_store.add_task("x")

    again = create_initial_state(settings=settings)
    assert [t.task for t in again.task_store] == ["x"]


def test_console_session(
    settings: SimpleNamespace,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    kv = RecordingKeyValueStore()
    state = create_initial_state(settings=settings, kv=kv)

    _feed(
        monkeypatch,
        [
            "buy milk",
            "/add walk dog",
            "",
            "/up 2",
            "/done 1",
            "/rm 2",
            "/add",
            "/exit",
            "/add never reached",
        ],
    )
    run_console_loop(state)

    out = capsys.readouterr().out
    assert "Error: Please input todo" in out
    assert [(t.task, t.completed) for t in state.task_store] == [("walk dog", True)]
    assert kv.data["todos"] == encode_tasks(state.task_store.tasks)


def test_console_survives_crashing_command(
    state, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def boom(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(state.task_store, "add_task", boom)
    _feed(monkeypatch, ["crash please"])

    run_console_loop(state)

    assert "Internal error while handling a command." in capsys.readouterr().out


def test_shutdown_cancels_stopwatch_and_stops_loop(state) -> None:
    runner = start_background_loop(name="shutdown-test")
    state.loop_runner = runner
    runner.call(state.stopwatch.start)
    ticker = state.stopwatch._ticker

    _shutdown(state)

    assert ticker is not None and ticker.cancelled()
    assert not state.stopwatch.running
    assert state.loop_runner is None
    assert not runner.thread.is_alive()
