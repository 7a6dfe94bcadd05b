from __future__ import annotations

import asyncio
import logging

import pytest

from adapters.scheduling.asyncio_scheduler import AsyncioScheduler


def test_repeats_until_cancelled() -> None:
    calls: list[int] = []

    async def scenario() -> None:
        done = asyncio.Event()

        def callback() -> None:
            calls.append(1)
            if len(calls) == 3:
                task.cancel()
                done.set()

        task = AsyncioScheduler().schedule_repeating(0.001, callback)
        await asyncio.wait_for(done.wait(), timeout=2)
        await asyncio.sleep(0.02)
        assert task.cancelled

    asyncio.run(scenario())
    assert len(calls) == 3


def test_cancel_before_first_tick_prevents_callback() -> None:
    calls: list[int] = []

    async def scenario() -> None:
        task = AsyncioScheduler().schedule_repeating(0.005, lambda: calls.append(1))
        task.cancel()
        task.cancel()
        await asyncio.sleep(0.02)

    asyncio.run(scenario())
    assert calls == []


def test_failing_callback_is_logged_and_rescheduled(caplog: pytest.LogCaptureFixture) -> None:
    calls: list[int] = []

    async def scenario() -> None:
        done = asyncio.Event()

        def callback() -> None:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            task.cancel()
            done.set()

        task = AsyncioScheduler().schedule_repeating(0.001, callback)
        await asyncio.wait_for(done.wait(), timeout=2)

    with caplog.at_level(logging.ERROR, logger="adapters.scheduling.asyncio_scheduler"):
        asyncio.run(scenario())

    assert len(calls) == 2
    assert "Scheduled callback failed." in caplog.text
