"""Tracker construction by content type and chain."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pagehub.core.exceptions import UnknownContentTypeError, UnsupportedChainError
from pagehub.core.types import ContentType
from pagehub.trackers.erc721 import BookTracker, Erc721Tracker
from pagehub.trackers.transport import (
    HttpTransport,
    JsonRpcTransport,
    RateLimitConfig,
    TransportConfig,
)

if TYPE_CHECKING:
    from pagehub.config import PageHubSettings

logger = logging.getLogger(__name__)


class TrackerFactory:
    """
    Creates ERC-721 trackers bound to per-chain RPC transports.

    Content types come in two kinds: registered types, which are probed for
    every unknown address, and convention types, which map a name used by
    curated data to an existing tracker class and are only probed as
    fallbacks.
    """

    def __init__(
        self,
        transports: dict[str, JsonRpcTransport],
        content_fetcher: HttpTransport | None = None,
        ipfs_gateway: str = "https://ipfs.io/ipfs/",
    ) -> None:
        self._transports = transports
        self._content_fetcher = content_fetcher or HttpTransport(source="metadata")
        self.ipfs_gateway = ipfs_gateway
        self._registered: dict[str, type[Erc721Tracker]] = {}
        self._conventions: dict[str, type[Erc721Tracker]] = {}

    def register(self, content_type: str, tracker_cls: type[Erc721Tracker]) -> None:
        """Register a formally supported content type."""
        self._registered[content_type] = tracker_cls

    def register_convention(self, content_type: str, tracker_cls: type[Erc721Tracker]) -> None:
        """Register a content type recognized by naming convention only."""
        self._conventions[content_type] = tracker_cls

    @property
    def registered_types(self) -> list[str]:
        return list(self._registered)

    @property
    def known_types(self) -> list[str]:
        return [*self._registered, *(t for t in self._conventions if t not in self._registered)]

    @property
    def chains(self) -> list[str]:
        return list(self._transports)

    def create(self, address: str, content_type: str, chain: str) -> Erc721Tracker:
        tracker_cls = self._registered.get(content_type) or self._conventions.get(content_type)
        if tracker_cls is None:
            raise UnknownContentTypeError(content_type)

        transport = self._transports.get(chain)
        if transport is None:
            raise UnsupportedChainError(chain)

        return tracker_cls(
            address,
            chain,
            rpc=transport,
            content_fetcher=self._content_fetcher,
            ipfs_gateway=self.ipfs_gateway,
            content_type=content_type,
        )

    @classmethod
    def from_settings(cls, settings: PageHubSettings) -> TrackerFactory:
        """Build transports for every supported chain that has an RPC URL."""
        rate_limit = RateLimitConfig(requests_per_second=settings.rpc_rate_limit_rps)
        transports: dict[str, JsonRpcTransport] = {}
        for chain in settings.supported_chains:
            url = settings.rpc_urls.get(chain)
            if not url:
                logger.warning(f"No RPC URL configured for {chain}, chain disabled")
                continue
            transports[chain] = JsonRpcTransport(
                chain,
                TransportConfig(
                    base_url=url,
                    timeout=settings.probe_timeout,
                    rate_limit=rate_limit,
                ),
            )

        factory = cls(
            transports,
            content_fetcher=HttpTransport(
                TransportConfig(timeout=settings.probe_timeout), source="metadata"
            ),
            ipfs_gateway=settings.ipfs_gateway,
        )
        # Every book contract is also a valid ERC-721, so the narrower type goes first
        factory.register(ContentType.BOOK, BookTracker)
        factory.register(ContentType.NFT, Erc721Tracker)
        for content_type in settings.fallback_content_types:
            factory.register_convention(content_type, BookTracker)
        return factory

    async def close(self) -> None:
        for transport in self._transports.values():
            await transport.close()
        await self._content_fetcher.close()
