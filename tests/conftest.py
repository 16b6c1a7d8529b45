"""Shared test fixtures for all tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, ClassVar

import pytest

from pagehub.config import PageHubSettings
from pagehub.core.addresses import normalize_address
from pagehub.core.exceptions import (
    TrackerError,
    UnknownContentTypeError,
    UnsupportedChainError,
)
from pagehub.core.models import AuthorRecord, ContentRecord
from pagehub.registry.index import RegistryIndex
from pagehub.resolution.strategy import ResolutionStrategy, StrategyConfig
from pagehub.services.content import ContentService
from pagehub.trackers.base import ContentTracker
from pagehub.trackers.registry import AdapterRegistry

TEST_CHAINS = ["ethereum", "base", "zora"]
REGISTERED_TYPES = ["nft", "book"]
FALLBACK_TYPES = ["alexandria_book", "publication"]


# ============================================================================
# Fake Chain World
# ============================================================================


@dataclass
class FakeContract:
    """A contract that validates as one content type on one chain."""

    info: dict[str, Any] = field(default_factory=dict)
    tokens: list[int] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    failing_tokens: set[int] = field(default_factory=set)
    delay: float = 0.0
    error: str | None = None
    # Seconds token reads hang before answering
    stall: float = 0.0
    enumeration_error: str | None = None


class ChainWorld:
    """
    In-memory stand-in for every chain.

    A contract only validates for the exact (address, chain, type) it was
    added with; every probe is recorded in `calls`.
    """

    def __init__(self) -> None:
        self.contracts: dict[tuple[str, str, str], FakeContract] = {}
        self.calls: list[tuple[str, str, str]] = []

    def add(self, address: str, chain: str, content_type: str, **kwargs: Any) -> FakeContract:
        contract = FakeContract(**kwargs)
        self.contracts[(normalize_address(address), chain, content_type)] = contract
        return contract

    def get(self, address: str, chain: str, content_type: str) -> FakeContract | None:
        return self.contracts.get((normalize_address(address), chain, content_type))


class FakeTracker(ContentTracker):
    """Tracker reading from a `ChainWorld`."""

    CONTENT_TYPE: ClassVar[str] = "nft"

    def __init__(self, address: str, chain: str, content_type: str, world: ChainWorld) -> None:
        super().__init__(address, chain, content_type)
        self.world = world

    def _contract(self) -> FakeContract:
        contract = self.world.get(self.address, self.chain, self.content_type)
        if contract is None:
            raise TrackerError(f"{self.address} is not {self.content_type} on {self.chain}")
        return contract

    async def get_collection_info(self) -> dict[str, Any]:
        self.world.calls.append((self.address, self.chain, self.content_type))
        contract = self._contract()
        if contract.delay:
            await asyncio.sleep(contract.delay)
        if contract.error:
            raise TrackerError(contract.error)
        return {
            "address": self.address,
            "chain": self.chain,
            "type": self.content_type,
            **contract.info,
        }

    async def _token_read(self) -> FakeContract:
        contract = self._contract()
        if contract.stall:
            await asyncio.sleep(contract.stall)
        return contract

    async def get_all_tokens(self, max_tokens: int = 100) -> list[int]:
        contract = await self._token_read()
        if contract.enumeration_error:
            raise TrackerError(contract.enumeration_error)
        return contract.tokens[:max_tokens]

    async def fetch_metadata(self, token_id: int) -> dict[str, Any]:
        contract = await self._token_read()
        if token_id in contract.failing_tokens:
            raise TrackerError(f"tokenURI reverted for {token_id}")
        return {"tokenId": str(token_id), "name": f"Token {token_id}", **contract.metadata}

    async def fetch_ownership(self, token_id: int) -> dict[str, Any]:
        return {"tokenId": str(token_id), "owner": "0x" + "ab" * 20}

    async def fetch_rights(self, token_id: int) -> dict[str, Any]:
        return {"tokenId": str(token_id), "royaltyReceiver": None, "royaltyBps": None}

    async def get_tokens_by_owner(self, owner: str, max_tokens: int = 100) -> list[int]:
        return self._contract().tokens[:max_tokens]


class FakeTrackerFactory:
    """Tracker provider over a `ChainWorld`."""

    def __init__(
        self,
        world: ChainWorld,
        chains: list[str] | None = None,
        registered: list[str] | None = None,
        conventions: list[str] | None = None,
    ) -> None:
        self.world = world
        self.chains = chains if chains is not None else list(TEST_CHAINS)
        self._registered = registered if registered is not None else list(REGISTERED_TYPES)
        self._conventions = conventions if conventions is not None else list(FALLBACK_TYPES)
        self.closed = False

    @property
    def registered_types(self) -> list[str]:
        return list(self._registered)

    @property
    def known_types(self) -> list[str]:
        return [*self._registered, *(t for t in self._conventions if t not in self._registered)]

    def create(self, address: str, content_type: str, chain: str) -> FakeTracker:
        if content_type not in self.known_types:
            raise UnknownContentTypeError(content_type)
        if chain not in self.chains:
            raise UnsupportedChainError(chain)
        return FakeTracker(address, chain, content_type, self.world)

    async def close(self) -> None:
        self.closed = True


class FakeAuthorDirectory:
    """Author directory for one chain, optionally failing or hanging on every call."""

    def __init__(
        self,
        chain: str,
        authors: dict[str, dict[str, Any]] | None = None,
        content: dict[str, list[dict[str, Any]]] | None = None,
        error: str | None = None,
        stall: float = 0.0,
    ) -> None:
        self.chain = chain
        self.authors = {normalize_address(k): v for k, v in (authors or {}).items()}
        self.content = {normalize_address(k): v for k, v in (content or {}).items()}
        self.error = error
        self.stall = stall
        self.closed = False

    async def get_author_by_address(self, address: str) -> AuthorRecord | None:
        if self.stall:
            await asyncio.sleep(self.stall)
        if self.error:
            raise TrackerError(self.error)
        data = self.authors.get(normalize_address(address))
        if data is None:
            return None
        return AuthorRecord.model_validate({"address": address, "chain": self.chain, **data})

    async def get_content_by_author(self, address: str) -> list[dict[str, Any]]:
        if self.stall:
            await asyncio.sleep(self.stall)
        if self.error:
            raise TrackerError(self.error)
        return [{"chain": self.chain, **item} for item in self.content.get(normalize_address(address), [])]

    async def close(self) -> None:
        self.closed = True


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_records() -> list[ContentRecord]:
    """Curated records spread over two chains."""
    return [
        ContentRecord(address="0xAA", chain="base", type="book", name="Xenia"),
        ContentRecord(
            address="0xF1",
            chain="ethereum",
            type="nft",
            name="Featured Drop",
            featured=True,
            description="Curated description",
        ),
        ContentRecord(address="0xE2", chain="ethereum", type="alexandria_book", name="Alexandria"),
    ]


@pytest.fixture
def registry_index(sample_records: list[ContentRecord]) -> RegistryIndex:
    return RegistryIndex(sample_records, chains=TEST_CHAINS)


@pytest.fixture
def empty_registry() -> RegistryIndex:
    return RegistryIndex([], chains=TEST_CHAINS)


@pytest.fixture
def world() -> ChainWorld:
    return ChainWorld()


@pytest.fixture
def tracker_factory(world: ChainWorld) -> FakeTrackerFactory:
    return FakeTrackerFactory(world)


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def mock_settings() -> PageHubSettings:
    """Create settings for testing with short timeouts."""
    return PageHubSettings(
        rpc_urls={chain: f"https://rpc.{chain}.test" for chain in TEST_CHAINS},
        indexer_urls={},
        supported_chains=TEST_CHAINS,
        fallback_content_types=FALLBACK_TYPES,
        probe_timeout=0.5,
        resolution_timeout=5.0,
        aggregation_concurrency=3,
        max_tokens=50,
        default_page_limit=20,
        max_page_limit=100,
        debug=True,
        log_level="DEBUG",
    )


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def strategy(registry_index: RegistryIndex, tracker_factory: FakeTrackerFactory) -> ResolutionStrategy:
    return ResolutionStrategy(
        registry_index,
        tracker_factory,
        supported_chains=TEST_CHAINS,
        fallback_types=FALLBACK_TYPES,
        config=StrategyConfig(probe_timeout=0.5, total_timeout=5.0),
    )


@pytest.fixture
def author_directories() -> list[FakeAuthorDirectory]:
    """Scenario with one author on ethereum and base."""
    return [
        FakeAuthorDirectory(
            "ethereum",
            authors={"0xAuthor": {"publicationCount": 3, "lastPublishedAt": "2024-01-01T00:00:00Z"}},
            content={"0xAuthor": [{"title": "Old", "publishedAt": "2023-05-01T00:00:00Z"}]},
        ),
        FakeAuthorDirectory(
            "base",
            authors={
                "0xAuthor": {
                    "name": "Ada",
                    "publicationCount": 5,
                    "lastPublishedAt": "2024-06-01T00:00:00Z",
                }
            },
            content={"0xAuthor": [{"title": "New", "publishedAt": "2024-06-01T00:00:00Z"}]},
        ),
    ]


@pytest.fixture
def adapter_registry(
    tracker_factory: FakeTrackerFactory,
    author_directories: list[FakeAuthorDirectory],
) -> AdapterRegistry:
    registry = AdapterRegistry(tracker_factory)
    for directory in author_directories:
        registry.register_author_directory(directory)
    return registry


@pytest.fixture
def content_service(
    registry_index: RegistryIndex,
    adapter_registry: AdapterRegistry,
    mock_settings: PageHubSettings,
) -> ContentService:
    return ContentService(registry_index, adapter_registry, mock_settings)


# ============================================================================
# Factory Fixtures
# ============================================================================


@pytest.fixture
def make_author_directory():
    """Factory fixture building author directories with custom data."""
    return FakeAuthorDirectory


@pytest.fixture
def make_strategy(tracker_factory: FakeTrackerFactory):
    """Factory fixture building a strategy over the shared fake world."""

    def _make(
        records: list[ContentRecord] | None = None,
        parallel: bool = False,
        probe_timeout: float = 0.5,
        total_timeout: float = 5.0,
        fallback_types: list[str] | None = None,
    ) -> ResolutionStrategy:
        return ResolutionStrategy(
            RegistryIndex(records or [], chains=TEST_CHAINS),
            tracker_factory,
            supported_chains=TEST_CHAINS,
            fallback_types=FALLBACK_TYPES if fallback_types is None else fallback_types,
            config=StrategyConfig(
                parallel_probes=parallel,
                probe_timeout=probe_timeout,
                total_timeout=total_timeout,
            ),
        )

    return _make
