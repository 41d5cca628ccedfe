"""Helpers for driving workers deterministically in tests."""

import asyncio
import itertools
import math
from collections.abc import Callable
from typing import Any

from yarl import URL


def stub_clock(iterations: int) -> Callable[[], float]:
    """Clock reading 0.0 for ``iterations`` calls, then infinity forever.

    A worker given this clock and a deadline of 0.0 or more issues exactly
    ``iterations`` requests.
    """
    ticks = itertools.chain(
        itertools.repeat(0.0, iterations), itertools.repeat(math.inf)
    )
    return lambda: next(ticks)


async def yield_to_loop(url: URL, **kwargs: Any) -> None:
    """aioresponses callback letting other workers run between mocked requests."""
    await asyncio.sleep(0)
