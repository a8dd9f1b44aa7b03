"""Simulated network calls for the demo flows.

The demo has no backend to wait on, so slow calls are emulated with a sleep.
The wait is a plain coroutine: callers can cancel the task or bound it with a
timeout instead of always waiting it out.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def simulated_call(result: T, *, delay: float, timeout: Optional[float] = None) -> T:
    """Return ``result`` after ``delay`` seconds.

    Raises ``asyncio.CancelledError`` if the awaiting task is cancelled and
    ``TimeoutError`` if ``timeout`` elapses first.
    """
    if delay < 0:
        raise ValueError("delay must be >= 0")

    async def _wait() -> T:
        if delay:
            await asyncio.sleep(delay)
        return result

    if timeout is None:
        return await _wait()
    try:
        return await asyncio.wait_for(_wait(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("simulated call timed out after %.2fs (delay %.2fs)", timeout, delay)
        raise TimeoutError(f"Simulated call exceeded {timeout}s")
