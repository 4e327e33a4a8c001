# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from pocket_todo.config import Settings, get_settings

_VARS = (
    "TODO_APP_NAME",
    "TODO_LOG_LEVEL",
    "TODO_DATA_DIR",
    "TODO_STORAGE_BACKEND",
    "TODO_DB_PATH",
    "TODO_JSON_PATH",
    "TODO_STORAGE_KEY",
    "TODO_STOPWATCH_INTERVAL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "pocket-todo"
    assert s.log_level == "WARNING"
    assert s.data_dir == Path(".local/pocket_todo")
    assert s.storage_backend == "sqlite"
    assert s.db_path == Path(".local/pocket_todo/todos.sqlite3")
    assert s.json_path == Path(".local/pocket_todo/todos.json")
    assert s.storage_key == "todos"
    assert s.stopwatch_interval == 1.0


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TODO_STORAGE_BACKEND", "JSON")
    monkeypatch.setenv("TODO_STORAGE_KEY", "work")
    monkeypatch.setenv("TODO_STOPWATCH_INTERVAL", "0.5")
    monkeypatch.setenv("TODO_LOG_LEVEL", "debug")

    s = Settings.from_env()
    assert s.data_dir == tmp_path
    assert s.json_path == tmp_path / "todos.json"
    assert s.storage_backend == "json"
    assert s.storage_key == "work"
    assert s.stopwatch_interval == 0.5
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value", "attr", "expected"),
    [
        ("TODO_STORAGE_BACKEND", "redis", "storage_backend", "sqlite"),
        ("TODO_STOPWATCH_INTERVAL", "fast", "stopwatch_interval", 1.0),
        ("TODO_STOPWATCH_INTERVAL", "-2", "stopwatch_interval", 1.0),
        ("TODO_STORAGE_KEY", "   ", "storage_key", "todos"),
    ],
)
def test_invalid_values_fall_back(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, attr: str, expected: object
) -> None:
    monkeypatch.setenv(name, value)
    assert getattr(Settings.from_env(), attr) == expected


def test_get_settings_is_a_singleton() -> None:
    assert get_settings() is get_settings()
