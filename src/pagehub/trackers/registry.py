"""Adapter registry owning tracker construction and author directories."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pagehub.trackers.base import AuthorDirectory, TrackerProvider
from pagehub.trackers.factory import TrackerFactory
from pagehub.trackers.indexer import ChainIndexer
from pagehub.trackers.transport import RateLimitConfig, TransportConfig

if TYPE_CHECKING:
    from pagehub.config import PageHubSettings

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    Holds every adapter the engine may use.

    Trackers are built on demand by the factory; author directories are
    registered explicitly, in chain priority order, and only adapters that
    implement the author capability are offered for author lookups.
    """

    def __init__(self, factory: TrackerProvider) -> None:
        self.factory = factory
        self._author_directories: list[AuthorDirectory] = []

    def register_author_directory(self, directory: AuthorDirectory) -> None:
        self._author_directories.append(directory)

    @property
    def author_directories(self) -> list[AuthorDirectory]:
        return list(self._author_directories)

    @classmethod
    def from_settings(cls, settings: PageHubSettings) -> AdapterRegistry:
        """Create a registry with adapters configured from settings."""
        registry = cls(TrackerFactory.from_settings(settings))

        for chain in settings.supported_chains:
            url = settings.indexer_urls.get(chain)
            if not url:
                continue
            registry.register_author_directory(
                ChainIndexer(
                    chain,
                    TransportConfig(
                        base_url=url,
                        timeout=settings.probe_timeout,
                        rate_limit=RateLimitConfig(
                            requests_per_second=settings.rpc_rate_limit_rps
                        ),
                    ),
                )
            )

        logger.info(
            f"Adapters ready: types={registry.factory.known_types}, "
            f"author directories={[d.chain for d in registry.author_directories]}"
        )
        return registry

    async def close_all(self) -> None:
        """Close every adapter's HTTP resources."""
        await self.factory.close()
        for directory in self._author_directories:
            await directory.close()
