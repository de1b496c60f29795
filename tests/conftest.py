"""Test configuration and fixtures."""

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from registry_tag_pruner.core.pacing import RequestPacer
from registry_tag_pruner.core.registry_client import RegistryClient
from tests.helpers import FakeRegistry


@pytest.fixture
def fake_registry():
    """Empty fake registry; tests add their own tags."""
    return FakeRegistry()


@pytest_asyncio.fixture
async def registry_url(fake_registry):
    """Serve the fake registry and return its base URL."""
    server = TestServer(fake_registry.make_app())
    await server.start_server()
    try:
        yield f"http://{server.host}:{server.port}"
    finally:
        await server.close()


@pytest_asyncio.fixture
async def client(registry_url):
    """Open client against the fake registry."""
    async with RegistryClient(registry_url, user="ci", password="secret") as client:
        yield client


@pytest.fixture
def pacer():
    """Pacer that never sleeps."""
    return RequestPacer(step=0)
