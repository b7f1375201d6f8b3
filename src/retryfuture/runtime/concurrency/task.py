"""Cooperative scheduling helpers."""

from __future__ import annotations

import asyncio


async def checkpoint() -> None:
    """Cooperative cancellation checkpoint.

    Yields control to the event loop so a pending cancellation is delivered
    before more work starts. The retry driver calls it between the backoff
    timer and the next attempt.
    """
    await asyncio.sleep(0)
