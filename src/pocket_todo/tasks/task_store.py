# src/pocket_todo/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import replace

from ..core.ports import KeyValueStore
from .task_codec import TaskDecodeError, decode_tasks, encode_tasks
from .task_models import Task, TaskId, new_task_id

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todos"


class ValidationError(ValueError):
    """User input rejected; the task list is left unchanged."""


class TaskStore:
    """
    In-memory ordered task list, persisted in full after every operation.

    - The list is held as a tuple and replaced wholesale on each change,
      so a half-applied update is never visible.
    - Order is priority: index 0 is the top.
    - The durable copy is best-effort. Save/load failures are logged and the
      in-memory list stays authoritative for the session.
    - Unknown ids are ignored (no error).
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        id_factory: Callable[[], TaskId] = new_task_id,
    ) -> None:
        if not key or not key.strip():
            raise ValueError("storage key is required")
        self._kv = kv
        self._key = key
        self._id_factory = id_factory
        self._tasks: tuple[Task, ...] = ()
        self._loaded = False

    # ---- persistence ----

    def load(self) -> None:
        """
        Restore the saved list. Called once at startup; later calls are ignored.

        Missing data, unreadable storage or a corrupt blob all give an empty list.
        """
        if self._loaded:
            logger.debug("TaskStore.load called again; ignoring")
            return
        self._loaded = True

        try:
            blob = self._kv.load(self._key)
        except Exception:
            logger.exception("Failed to load task list key=%s", self._key)
            return

        if blob is None:
            logger.info("No saved task list key=%s; starting empty", self._key)
            return

        try:
            self._tasks = tuple(decode_tasks(blob))
        except TaskDecodeError:
            logger.exception("Saved task list is corrupt key=%s; starting empty", self._key)
            self._tasks = ()
            return

        logger.info("Loaded %d tasks key=%s", len(self._tasks), self._key)

    def _commit(self, tasks: tuple[Task, ...]) -> None:
        self._tasks = tasks
        try:
            self._kv.save(self._key, encode_tasks(tasks))
        except Exception:
            logger.exception("Failed to save task list key=%s (kept in memory)", self._key)

    # ---- queries ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def index_of(self, task_id: TaskId) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def get_task(self, task_id: TaskId) -> Task | None:
        idx = self.index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def count_completed(self) -> int:
        return sum(1 for t in self._tasks if t.completed)

    # ---- operations ----

    def add_task(self, description: str) -> Task:
        if not description:
            raise ValidationError("Please input todo")

        task = Task(id=self._id_factory(), task=description, completed=False, priority=0)
        if self.index_of(task.id) is not None:
            raise RuntimeError(f"id factory returned a duplicate id: {task.id}")

        self._commit((*self._tasks, task))
        logger.debug("Task added id=%s total=%d", task.id, len(self._tasks))
        return task

    def _set_completed(self, task_id: str, completed: bool) -> None:
        self._commit(
            tuple(
                replace(t, completed=completed) if t.id == task_id else t
                for t in self._tasks
            )
        )

    def mark_complete(self, task_id: TaskId) -> None:
        self._set_completed(task_id, True)

    def cancel_completion(self, task_id: TaskId) -> None:
        self._set_completed(task_id, False)

    def toggle_complete(self, task_id: TaskId) -> None:
        task = self.get_task(task_id)
        if task is None:
            self._commit(self._tasks)
            return
        if task.completed:
            self.cancel_completion(task_id)
        else:
            self.mark_complete(task_id)

    def delete_task(self, task_id: TaskId) -> None:
        self._commit(tuple(t for t in self._tasks if t.id != task_id))

    def _swap(self, i: int, j: int) -> None:
        tasks = list(self._tasks)
        tasks[i], tasks[j] = tasks[j], tasks[i]
        self._commit(tuple(tasks))

    def increase_priority(self, task_id: TaskId) -> None:
        idx = self.index_of(task_id)
        if idx is None or idx == 0:
            self._commit(self._tasks)
            return
        self._swap(idx, idx - 1)

    def decrease_priority(self, task_id: TaskId) -> None:
        idx = self.index_of(task_id)
        if idx is None or idx >= len(self._tasks) - 1:
            self._commit(self._tasks)
            return
        self._swap(idx, idx + 1)
