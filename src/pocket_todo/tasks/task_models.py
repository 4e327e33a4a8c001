# src/pocket_todo/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TypeAlias

# New ids are strings; lists saved by the browser version carry numeric ids.
TaskId: TypeAlias = str | int | float


def new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single to-do entry.

    Notes:
    - `task` is the user-supplied text; it never changes after creation.
    - `id` keeps the JSON type it was saved with, so `1` and `"1"` are different tasks.
    - Position in the list is the priority. `priority` is carried only so
      previously saved lists round-trip unchanged; nothing reads it.
    """

    id: TaskId
    task: str
    completed: bool = False
    priority: int = 0

    @property
    def description(self) -> str:
        return self.task
