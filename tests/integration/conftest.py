"""Integration test fixtures for the ASGI application."""

from __future__ import annotations

from typing import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from pagehub.api.app import create_app
from pagehub.config import PageHubSettings
from pagehub.registry.index import RegistryIndex
from pagehub.trackers.registry import AdapterRegistry


@pytest.fixture
def populated_world(world):
    """On-chain state shared by the route tests."""
    world.add(
        "0xAA",
        "base",
        "book",
        info={"name": "Xenia Chain"},
        tokens=[1, 2, 3],
        failing_tokens={2},
        metadata={"title": "Xenia"},
    )
    world.add("0xF1", "ethereum", "nft", info={"symbol": "FD"})
    world.add("0xBB", "zora", "nft", info={"name": "Zora Drop"}, tokens=[1, 2])
    return world


@pytest.fixture
def app(
    mock_settings: PageHubSettings,
    registry_index: RegistryIndex,
    adapter_registry: AdapterRegistry,
):
    """
    Application with fake adapters already on app.state.

    The ASGI transport does not run the lifespan, so state is set up here
    the way startup would.
    """
    app = create_app(mock_settings)
    app.state.registry_index = registry_index
    app.state.adapter_registry = adapter_registry
    return app


@pytest.fixture
async def test_client(app, populated_world) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
