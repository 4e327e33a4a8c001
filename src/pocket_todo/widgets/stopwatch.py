# src/pocket_todo/widgets/stopwatch.py

from __future__ import annotations

"""
Stopwatch widget.

A counter advanced by an asyncio ticker task:
- start() schedules the ticker on the running loop,
- stop()/reset() cancel it,
- aclose() is the teardown hook; it always cancels, whatever the state.

The stopwatch has no link to the task list.
"""

import asyncio
import contextlib
import logging

logger = logging.getLogger(__name__)


def format_time(seconds: int) -> str:
    """MM:SS, both zero-padded; minutes are not capped at 59."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


class Stopwatch:
    def __init__(self, *, interval_seconds: float = 1.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = float(interval_seconds)
        self.elapsed = 0
        self._ticker: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    async def _tick_forever(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.elapsed += 1
            logger.debug("stopwatch tick elapsed=%s", self.elapsed)

    def start(self) -> None:
        """Must be called from inside the event loop that will run the ticker."""
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._ticker = loop.create_task(self._tick_forever(), name="stopwatch-ticker")
        logger.info("Stopwatch started at %s", format_time(self.elapsed))

    def stop(self) -> None:
        ticker, self._ticker = self._ticker, None
        if ticker is not None and not ticker.done():
            ticker.cancel()
            logger.info("Stopwatch stopped at %s", format_time(self.elapsed))

    def reset(self) -> None:
        self.stop()
        self.elapsed = 0

    async def aclose(self) -> None:
        ticker = self._ticker
        self.stop()
        if ticker is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await ticker

    def format_elapsed(self) -> str:
        return format_time(self.elapsed)
