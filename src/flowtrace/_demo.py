"""Simulated price ticker used by ``flowtrace demo``."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

PRICES = (150.0, 152.5, 151.0)


class NetworkError(Exception):
    """Raised by the ticker when asked to fail."""


async def ticker(*, interval: float = 0.5, fail: bool = False) -> AsyncIterator[float]:
    """Yield a few prices ``interval`` seconds apart, then stop or fail."""
    for i, price in enumerate(PRICES):
        if i:
            await asyncio.sleep(interval)
        yield price
    if fail:
        await asyncio.sleep(interval)
        msg = "Simulated Network Error"
        raise NetworkError(msg)
