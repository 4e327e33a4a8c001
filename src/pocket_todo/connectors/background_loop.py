# src/pocket_todo/connectors/background_loop.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BackgroundLoop:
    """
    An asyncio event loop running in a daemon thread.

    Why a thread:
    - the console REPL is blocking (input()),
    - the stopwatch ticker is an asyncio task and needs a loop that keeps running.

    Callers on other threads go through call()/run(), which marshal work onto the loop.
    """

    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def call(self, fn: Callable[[], T], timeout: float | None = 5.0) -> T:
        """Run a plain callable on the loop thread and return its result."""

        async def _invoke() -> T:
            return fn()

        return self.run(_invoke(), timeout=timeout)

    def run(self, coro: Awaitable[T], timeout: float | None = 5.0) -> T:
        """Run a coroutine on the loop thread and wait for its result."""
        fut = asyncio.run_coroutine_threadsafe(coro, self.loop)  # type: ignore[arg-type]
        return fut.result(timeout=timeout)

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Background loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_background_loop(name: str = "pocket-todo-loop") -> BackgroundLoop:
    ready = threading.Event()
    holder: list[tuple[asyncio.AbstractEventLoop, asyncio.Event]] = []

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder.append((loop, stop_event))
        ready.set()

        try:
            loop.run_until_complete(stop_event.wait())
            # Let anything cancelled during shutdown unwind.
            pending = [t for t in asyncio.all_tasks(loop) if not t.done()]
            for t in pending:
                t.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name=name, daemon=True)
    t.start()

    if not ready.wait(timeout=5.0):
        raise RuntimeError("background event loop did not start")

    loop, stop_event = holder[0]

    logger.info("Background loop started thread=%s", name)
    return BackgroundLoop(thread=t, loop=loop, stop_event=stop_event)
