"""Main library client for standalone usage."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pagehub.config import PageHubSettings
from pagehub.core.models import CollectionItemsPage, Page, PublicationsPage
from pagehub.core.types import ALL_CHAINS
from pagehub.registry.index import RegistryIndex
from pagehub.resolution.strategy import ResolutionOutcome
from pagehub.services.content import ContentService
from pagehub.trackers.registry import AdapterRegistry

logger = logging.getLogger(__name__)


class PageHubClient:
    """
    Main client for the pagehub library.

    Resolves and aggregates on-chain content without running the web server.

    Usage:
        async with PageHubClient() as client:
            # Find out where an address lives
            outcome = await client.resolve("0x...")

            # Collection details merged with the registry
            collection = await client.get_collection("0x...", chain="base")

            # Books with per-address chain hints
            page = await client.list_books(["0x...", "0x..."], chains=["base"])

    Settings are loaded from environment variables or can be passed explicitly.
    """

    def __init__(
        self,
        settings: PageHubSettings | None = None,
        *,
        registry: RegistryIndex | None = None,
        adapters: AdapterRegistry | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Application settings. If not provided, loaded from environment.
            registry: Pre-built registry index (defaults to the configured data)
            adapters: Pre-built adapters (defaults to ones built from settings)
        """
        self._settings = settings or PageHubSettings()
        self._registry = registry
        self._adapters = adapters
        self._service: ContentService | None = None

    async def __aenter__(self) -> PageHubClient:
        """Initialize resources on context entry."""
        self._initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Clean up resources on context exit."""
        await self.close()

    def _initialize(self) -> None:
        if self._registry is None:
            self._registry = RegistryIndex.from_settings(self._settings)
        if self._adapters is None:
            self._adapters = AdapterRegistry.from_settings(self._settings)
        self._service = ContentService(self._registry, self._adapters, self._settings)

    async def close(self) -> None:
        """Close all resources."""
        if self._adapters:
            await self._adapters.close_all()
            self._adapters = None
        self._service = None

    @property
    def service(self) -> ContentService:
        if self._service is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with PageHubClient() as client:'"
            )
        return self._service

    async def resolve(
        self,
        address: str,
        chain: str | None = None,
        content_type: str | None = None,
    ) -> ResolutionOutcome:
        """Resolve an address to the chain and content type it validates as."""
        return await self.service.strategy.resolve(address, chain, content_type)

    async def list_collections(
        self,
        chain: str = ALL_CHAINS,
        addresses: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Page:
        return await self.service.list_collections(chain, addresses, limit, offset)

    async def get_collection(
        self,
        address: str,
        chain: str | None = None,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        return await self.service.get_collection_details(address, chain, content_type)

    async def get_collection_items(
        self,
        address: str,
        chain: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> CollectionItemsPage:
        return await self.service.get_collection_items(address, chain, None, limit, offset)

    async def list_books(
        self,
        addresses: Sequence[str],
        chains: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Page:
        return await self.service.list_books(addresses, chains, limit, offset)

    async def get_book(self, book_id: str, chain: str | None = None) -> dict[str, Any]:
        return await self.service.get_book_details(book_id, chain)

    async def get_author(self, address: str) -> dict[str, Any]:
        return await self.service.get_author_details(address)

    async def get_author_publications(
        self,
        address: str,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PublicationsPage:
        return await self.service.get_author_publications(address, limit, offset)


async def get_collection(
    address: str,
    chain: str | None = None,
    *,
    settings: PageHubSettings | None = None,
) -> dict[str, Any]:
    """
    Fetch one collection (convenience function).

    For multiple lookups, use PageHubClient to reuse connections.
    """
    async with PageHubClient(settings) as client:
        return await client.get_collection(address, chain)
