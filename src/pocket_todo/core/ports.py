# src/pocket_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on a Protocol instead of a concrete storage engine.
This keeps backends swappable and makes testing easier.
"""

from typing import Protocol


class KeyValueStore(Protocol):
    """
    Durable "blob by key" storage.

    - load(key) returns None when nothing was saved under that key.
    - Both methods may raise on I/O errors; callers decide how to recover.
    """

    def load(self, key: str) -> str | None: ...

    def save(self, key: str, blob: str) -> None: ...

    def describe(self) -> str: ...
