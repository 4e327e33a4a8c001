# src/pocket_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..tasks.task_store import TaskStore
from ..widgets.stopwatch import Stopwatch
from ..widgets.text_color import TextColor

if TYPE_CHECKING:
    from ..connectors.background_loop import BackgroundLoop


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: object

    task_store: TaskStore
    stopwatch: Stopwatch
    text_color: TextColor = field(default_factory=TextColor)

    # Set by the console session; the stopwatch ticker lives on this loop.
    loop_runner: BackgroundLoop | None = None
