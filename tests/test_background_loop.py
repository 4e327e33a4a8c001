# tests/test_background_loop.py

from __future__ import annotations

import asyncio
import threading

import pytest

from pocket_todo.connectors.background_loop import start_background_loop


def test_call_runs_on_loop_thread() -> None:
    runner = start_background_loop(name="bg-test")
    try:
        name = runner.call(lambda: threading.current_thread().name)
        assert name == "bg-test"

        async def _in_loop() -> bool:
            return asyncio.get_running_loop() is runner.loop

        assert runner.run(_in_loop()) is True
    finally:
        runner.stop()
        runner.join(timeout=5.0)

    assert not runner.thread.is_alive()


def test_call_propagates_exceptions(loop_runner) -> None:
    def boom() -> None:
        raise KeyError("x")

    with pytest.raises(KeyError):
        loop_runner.call(boom)


def test_stop_cancels_leftover_tasks() -> None:
    runner = start_background_loop(name="bg-leftover")
    cancelled = threading.Event()

    async def forever() -> None:
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    runner.call(lambda: asyncio.get_running_loop().create_task(forever()))
    runner.stop()
    runner.join(timeout=5.0)

    assert cancelled.is_set()
    assert not runner.thread.is_alive()
