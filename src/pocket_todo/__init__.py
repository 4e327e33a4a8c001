"""pocket-todo: a single-screen task list with a stopwatch and a text-color toggle."""

__version__ = "0.1.0"
