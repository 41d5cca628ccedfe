"""Shared fixtures for race-blitz tests."""

from collections.abc import AsyncGenerator, Generator

import aiohttp
import pytest
from aioresponses import aioresponses as aioresponses_cls


@pytest.fixture
def aioresponses() -> Generator[aioresponses_cls, None, None]:
    """Patch aiohttp so no request leaves the process."""
    with aioresponses_cls() as mocked:
        yield mocked


@pytest.fixture
async def session(
    aioresponses: aioresponses_cls,
) -> AsyncGenerator[aiohttp.ClientSession, None]:
    """Client session whose requests are answered by aioresponses."""
    async with aiohttp.ClientSession() as client:
        yield client
