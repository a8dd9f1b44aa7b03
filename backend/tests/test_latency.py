from __future__ import annotations

import asyncio

import pytest

from lab2dent.services.latency import simulated_call


def test_simulated_call_returns_result() -> None:
    assert asyncio.run(simulated_call("ok", delay=0.01)) == "ok"


def test_zero_delay_returns_immediately() -> None:
    assert asyncio.run(simulated_call(42, delay=0)) == 42


def test_negative_delay_is_rejected() -> None:
    with pytest.raises(ValueError, match="delay must be >= 0"):
        asyncio.run(simulated_call(None, delay=-1))


def test_timeout_shorter_than_delay_raises() -> None:
    with pytest.raises(TimeoutError, match="exceeded"):
        asyncio.run(simulated_call("late", delay=5, timeout=0.01))


def test_caller_can_cancel_pending_call() -> None:
    async def _run() -> bool:
        task = asyncio.create_task(simulated_call("never", delay=5))
        await asyncio.sleep(0)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            return True
        return False

    assert asyncio.run(_run()) is True
