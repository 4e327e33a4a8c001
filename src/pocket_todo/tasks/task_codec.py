# src/pocket_todo/tasks/task_codec.py

"""
JSON encoding of the whole task list.

Layout: a JSON array of objects, in list order:
    [{"id":"...","task":"...","completed":false,"priority":0},...]

Older saves used random floats as ids; those keep their JSON type, and
the output is compact (no spaces after separators) so such saves re-encode
to the same bytes.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from typing import Any

from .task_models import Task, TaskId


class TaskDecodeError(ValueError):
    """Stored blob is not a valid task list."""


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "task": task.task,
        "completed": task.completed,
        "priority": task.priority,
    }


def _check_id(raw: Any) -> TaskId:
    # bool is an int subclass; reject it explicitly.
    if isinstance(raw, bool):
        raise TaskDecodeError(f"invalid task id: {raw!r}")
    if isinstance(raw, str) and raw:
        return raw
    if isinstance(raw, int) or (isinstance(raw, float) and math.isfinite(raw)):
        return raw
    raise TaskDecodeError(f"invalid task id: {raw!r}")


def task_from_dict(raw: Any) -> Task:
    if not isinstance(raw, dict):
        raise TaskDecodeError(f"task entry must be an object, got {type(raw).__name__}")

    text = raw.get("task")
    if not isinstance(text, str) or not text:
        raise TaskDecodeError(f"task entry has no text: {raw!r}")

    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        raise TaskDecodeError(f"completed must be a boolean: {raw!r}")

    priority = raw.get("priority", 0)
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise TaskDecodeError(f"priority must be an integer: {raw!r}")

    return Task(id=_check_id(raw.get("id")), task=text, completed=completed, priority=priority)


def encode_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps(
        [task_to_dict(t) for t in tasks], ensure_ascii=False, separators=(",", ":")
    )


def decode_tasks(blob: str | bytes) -> list[Task]:
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise TaskDecodeError(f"stored task list is not JSON: {e}") from e

    if not isinstance(data, list):
        raise TaskDecodeError(f"stored task list must be an array, got {type(data).__name__}")

    tasks = [task_from_dict(item) for item in data]

    seen: set[TaskId] = set()
    for t in tasks:
        if t.id in seen:
            raise TaskDecodeError(f"duplicate task id: {t.id!r}")
        seen.add(t.id)

    return tasks
