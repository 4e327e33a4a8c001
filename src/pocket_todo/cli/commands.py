# src/pocket_todo/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import sys
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Task, TaskId
from ..tasks.task_store import ValidationError

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        # Keep the raw remainder so task text keeps its inner spacing.
        rest = line[1:].lstrip()[len(parts[0]) :].strip()
        args = [rest] if name in _RAW_TEXT_COMMANDS and rest else parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()

# Commands whose argument is free text (passed through as a single arg).
_RAW_TEXT_COMMANDS = {"add", "a"}

# The console redraws the list after these.
REDRAW_AFTER = {"add", "a", "done", "undone", "toggle", "t", "rm", "del", "up", "down", "color"}


def command_name(line: str) -> str | None:
    parts = line[1:].split() if line.startswith("/") else []
    return parts[0].lower() if parts else None


# ---- rendering ----


def render_tasks(state: AppState, *, color: bool | None = None) -> str:
    if color is None:
        color = sys.stdout.isatty()

    tasks = state.task_store.tasks
    if not tasks:
        return "(no tasks)"

    lines = []
    for pos, t in enumerate(tasks, start=1):
        box = "[x]" if t.completed else "[ ]"
        text = state.text_color.paint(t.task, enabled=color)
        if t.completed and color:
            # strike-through
            text = f"\033[9m{text}\033[0m"
        lines.append(f"{pos:>3}. {box} {text}")
    return "\n".join(lines)


def _resolve_position(state: AppState, args: list[str], usage: str) -> Task | str:
    """Map a 1-based list position to its task, or return an error message."""
    if len(args) != 1:
        return f"Usage: {usage}"
    raw = args[0].rstrip(".")
    if not raw.isdecimal():
        return f"Invalid position: {args[0]}"
    pos = int(raw)
    tasks = state.task_store.tasks
    if pos < 1 or pos > len(tasks):
        return f"No task #{pos} (list has {len(tasks)})."
    return tasks[pos - 1]


# ---- task commands ----


def cmd_add(state: AppState, args: list[str]) -> str:
    text = " ".join(args).strip()
    try:
        task = state.task_store.add_task(text)
    except ValidationError as e:
        return f"Error: {e}"
    return f"Added #{len(state.task_store)}: {task.task}"


def _positional(
    op: Callable[[AppState, TaskId], None], usage: str, done: str
) -> CommandHandler2:
    def handler(state: AppState, args: list[str]) -> str:
        target = _resolve_position(state, args, usage)
        if isinstance(target, str):
            return target
        op(state, target.id)
        return f"{done}: {target.task}"

    return handler


cmd_done = _positional(lambda s, tid: s.task_store.mark_complete(tid), "/done <n>", "Completed")
cmd_undone = _positional(
    lambda s, tid: s.task_store.cancel_completion(tid), "/undone <n>", "Reopened"
)
cmd_toggle = _positional(lambda s, tid: s.task_store.toggle_complete(tid), "/toggle <n>", "Toggled")
cmd_rm = _positional(lambda s, tid: s.task_store.delete_task(tid), "/rm <n>", "Deleted")
cmd_up = _positional(lambda s, tid: s.task_store.increase_priority(tid), "/up <n>", "Raised")
cmd_down = _positional(lambda s, tid: s.task_store.decrease_priority(tid), "/down <n>", "Lowered")


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_tasks(state)


# ---- widgets ----


def cmd_stopwatch(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /sw          -> show time
    /sw start    -> start ticking
    /sw stop     -> pause
    /sw reset    -> stop and zero
    """
    sw = state.stopwatch
    if not args:
        return f"Stopwatch {sw.format_elapsed()} ({'running' if sw.running else 'stopped'})."

    sub = args[0].lower()
    runner = state.loop_runner

    if sub == "start":
        if runner is None:
            return "Stopwatch is unavailable (no event loop)."
        if sw.running:
            return f"Stopwatch is already running ({sw.format_elapsed()})."
        runner.call(sw.start)
        return f"Stopwatch started at {sw.format_elapsed()}."

    if sub == "stop":
        if runner is not None:
            runner.call(sw.stop)
        else:
            sw.stop()
        return f"Stopwatch stopped at {sw.format_elapsed()}."

    if sub == "reset":
        if runner is not None:
            runner.call(sw.reset)
        else:
            sw.reset()
        if emit:
            with contextlib.suppress(Exception):
                emit("[SW] Reset.")
        return f"Stopwatch {sw.format_elapsed()}."

    return "Usage: /sw start | /sw stop | /sw reset"


def cmd_color(state: AppState, args: list[str]) -> str:
    value = state.text_color.toggle()
    logger.debug("Text color -> %s", value)
    return f"Text color is now {value}."


# ---- info ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    backend = str(getattr(state.settings, "storage_backend", "?"))
    return (
        "Status:\n"
        f"  Tasks: {len(store)} ({store.count_completed()} completed)\n"
        f"  Stopwatch: {state.stopwatch.format_elapsed()}"
        f" ({'running' if state.stopwatch.running else 'stopped'})\n"
        f"  Text color: {state.text_color.value}\n"
        f"  Storage: {backend}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", aliases=["a"])
registry.register("done", cmd_done, help_text="Mark task #n complete.")
registry.register("undone", cmd_undone, help_text="Cancel completion of task #n.")
registry.register("toggle", cmd_toggle, help_text="Flip completion of task #n.", aliases=["t"])
registry.register("rm", cmd_rm, help_text="Delete task #n.", aliases=["del"])
registry.register("up", cmd_up, help_text="Raise priority of task #n.")
registry.register("down", cmd_down, help_text="Lower priority of task #n.")
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register(
    "sw", cmd_stopwatch, help_text="Stopwatch: /sw | /sw start | /sw stop | /sw reset."
)
registry.register("color", cmd_color, help_text="Toggle task text color (black/red).")
registry.register("status", cmd_status, help_text="Show counts, stopwatch, color and storage.")
