"""Fixtures for integration tests against a local ticket shop."""

import socket
from collections.abc import AsyncGenerator

import pytest
from aiohttp.test_utils import TestServer

from race_blitz.testing.ticket_shop import TicketStore, create_app


@pytest.fixture
def store() -> TicketStore:
    """Create a fresh ticket inventory."""
    return TicketStore()


@pytest.fixture
async def server(store: TicketStore) -> AsyncGenerator[TestServer, None]:
    """Serve the ticket shop on a random local port."""
    test_server = TestServer(create_app(store), host="127.0.0.1")
    await test_server.start_server()
    yield test_server
    await test_server.close()


@pytest.fixture
def closed_port_url() -> str:
    """URL of a local port nothing listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}/buy"
