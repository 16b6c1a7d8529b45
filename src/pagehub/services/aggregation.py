"""Partial-failure-tolerant aggregation, sorting and pagination."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from pagehub.core.exceptions import TrackerError
from pagehub.core.models import AuthorProfile, AuthorRecord, DegradedToken, Page, Pagination
from pagehub.core.normalization import collation_key, parse_timestamp
from pagehub.resolution.merge import degraded_item, merge_content, merge_or_degrade
from pagehub.resolution.strategy import ResolutionStrategy
from pagehub.trackers.base import AuthorDirectory, ContentTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")

AUTHOR_SCALAR_FIELDS = ("name", "bio", "avatar", "website", "social")


@dataclass(frozen=True)
class AddressTarget:
    """One address to aggregate, with optional per-address hints."""

    address: str
    chain: str | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class ItemFetched:
    item: dict[str, Any]


@dataclass(frozen=True)
class ItemFailed:
    """Degraded placeholder (or registry fallback) for an item that failed."""

    item: dict[str, Any]
    error: str


ItemResult = ItemFetched | ItemFailed


@dataclass(frozen=True)
class _DirectoryFailure:
    chain: str
    error: str


class Aggregator:
    """
    Drives per-item work over many addresses, tokens or author directories.

    Items run concurrently under a semaphore and results always come back
    in input order. Item work never raises: failures come back as
    `ItemFailed` values carrying a placeholder, so one bad item never
    removes another from the page. Every adapter call is bounded by
    `call_timeout`; a stalled call fails like any other.
    """

    def __init__(
        self,
        strategy: ResolutionStrategy,
        author_directories: Sequence[AuthorDirectory] = (),
        concurrency: int = 5,
        call_timeout: float = 10.0,
    ) -> None:
        self.strategy = strategy
        self.author_directories = list(author_directories)
        self.concurrency = concurrency
        self.call_timeout = call_timeout

    async def bounded(self, call: Awaitable[T], what: str) -> T:
        """Await one adapter call, raising `TrackerError` once it stalls."""
        try:
            async with asyncio.timeout(self.call_timeout):
                return await call
        except asyncio.TimeoutError:
            raise TrackerError(f"{what} timed out after {self.call_timeout}s") from None

    async def collect(
        self,
        inputs: Iterable[T],
        fetch: Callable[[T], Awaitable[ItemResult]],
    ) -> list[ItemResult]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run(value: T) -> ItemResult:
            async with semaphore:
                return await fetch(value)

        return list(await asyncio.gather(*(run(value) for value in inputs)))

    # =========================================================================
    # Address-set aggregation
    # =========================================================================

    async def resolve_item(
        self,
        target: AddressTarget,
        type_scope: Iterable[str] | None = None,
        with_first_token: bool = False,
    ) -> ItemResult:
        """Resolve and merge one address; failures degrade instead of raising."""
        outcome = await self.strategy.resolve(
            target.address,
            chain_hint=target.chain,
            type_hint=target.content_type,
            type_scope=type_scope,
        )

        if not outcome.found:
            error = outcome.last_error or "Content not found on any supported chain"
            logger.warning(f"Degrading {target.address}: {error}")
            item = merge_or_degrade(target.address, outcome.record, None, error, target.chain)
            return ItemFailed(item=item, error=error)

        merged = merge_content(outcome.record, outcome.resolved)
        if with_first_token:
            merged = await self.with_first_token(outcome.resolution.tracker, merged)
        return ItemFetched(item=merged)

    async def resolve_many(
        self,
        targets: Sequence[AddressTarget],
        type_scope: Iterable[str] | None = None,
        with_first_token: bool = False,
    ) -> list[ItemResult]:
        scope = tuple(type_scope) if type_scope is not None else None
        return await self.collect(
            targets,
            lambda target: self.resolve_item(target, scope, with_first_token),
        )

    async def with_first_token(
        self,
        tracker: ContentTracker,
        collection: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Overlay the first token's metadata on collection data.

        Identity fields stay those of the collection. A failed token read is
        reported inline as `_metadataFetchError`.
        """
        identity = {key: collection[key] for key in ("address", "chain", "type") if key in collection}
        try:
            token_ids = await self.bounded(tracker.get_all_tokens(max_tokens=1), "Token enumeration")
            if not token_ids:
                return collection
            metadata = await self.bounded(
                tracker.fetch_metadata(token_ids[0]), f"Metadata for token {token_ids[0]}"
            )
        except Exception as e:
            logger.warning(f"First-token metadata for {tracker.address} failed: {e}")
            return {**collection, "_metadataFetchError": str(e)}

        return {**collection, **metadata, **identity, "tokenId": str(token_ids[0])}

    # =========================================================================
    # Token aggregation
    # =========================================================================

    async def fetch_token(self, tracker: ContentTracker, token_id: int) -> ItemResult:
        try:
            metadata = await self.bounded(
                tracker.fetch_metadata(token_id), f"Metadata for token {token_id}"
            )
            return ItemFetched(item=metadata)
        except Exception as e:
            logger.warning(f"Metadata for token {token_id} of {tracker.address} failed: {e}")
            placeholder = DegradedToken(token_id=str(token_id), error=str(e)).to_dict()
            return ItemFailed(item=placeholder, error=str(e))

    async def tokens(self, tracker: ContentTracker, token_ids: Sequence[int]) -> list[ItemResult]:
        return await self.collect(token_ids, lambda token_id: self.fetch_token(tracker, token_id))

    # =========================================================================
    # Author aggregation
    # =========================================================================

    async def _query_directories(
        self,
        query: Callable[[AuthorDirectory], Awaitable[Any]],
    ) -> list[Any | _DirectoryFailure]:
        """Run a query against every author directory, in directory order."""

        async def run(directory: AuthorDirectory) -> Any | _DirectoryFailure:
            try:
                return await self.bounded(query(directory), f"Author directory {directory.chain}")
            except Exception as e:
                logger.warning(f"Author directory {directory.chain} failed: {e}")
                return _DirectoryFailure(chain=directory.chain, error=str(e))

        return list(await asyncio.gather(*(run(d) for d in self.author_directories)))

    async def author_profile(self, address: str) -> AuthorProfile | None:
        """Merge every chain's record for an author; None when no chain knows it."""
        results = await self._query_directories(
            lambda directory: directory.get_author_by_address(address)
        )
        records = [result for result in results if isinstance(result, AuthorRecord)]
        return merge_author_records(address, records)

    async def author_publications(self, address: str) -> list[dict[str, Any]]:
        results = await self._query_directories(
            lambda directory: directory.get_content_by_author(address)
        )
        publications: list[dict[str, Any]] = []
        for result in results:
            match result:
                case _DirectoryFailure():
                    continue
                case list():
                    publications.extend(result)
        return sort_by_date_desc(publications, "publishedAt")

    async def fetch_author(self, address: str) -> ItemResult:
        profile = await self.author_profile(address)
        if profile is None:
            error = "Author not found on any chain"
            return ItemFailed(item=degraded_item(address, None, error), error=error)
        return ItemFetched(item=profile.to_dict())

    async def authors(self, addresses: Sequence[str]) -> list[ItemResult]:
        return await self.collect(addresses, self.fetch_author)


def merge_author_records(address: str, records: Sequence[AuthorRecord]) -> AuthorProfile | None:
    """
    Union per-chain author records in probe order.

    Chains keep first-seen order; scalar fields take the first non-empty
    value; publication counts are summed; the latest publish date wins.
    """
    if not records:
        return None

    profile = AuthorProfile(address=address)
    for record in records:
        if record.chain not in profile.chains:
            profile.chains.append(record.chain)
        for field_name in AUTHOR_SCALAR_FIELDS:
            if not getattr(profile, field_name) and getattr(record, field_name):
                setattr(profile, field_name, getattr(record, field_name))
        profile.total_publications += record.publication_count
        if record.last_published_at and (
            profile.last_published_at is None
            or parse_timestamp(record.last_published_at) > parse_timestamp(profile.last_published_at)
        ):
            profile.last_published_at = record.last_published_at
    return profile


# =============================================================================
# Sorting and pagination
# =============================================================================


def items_of(results: Iterable[ItemResult]) -> list[dict[str, Any]]:
    return [result.item for result in results]


def sort_featured_then_name(items: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Featured first, then locale-style by name (or title); empty names first."""
    return sorted(
        items,
        key=lambda item: (
            not item.get("featured", False),
            collation_key(item.get("name") or item.get("title")),
        ),
    )


def sort_by_date_desc(items: Iterable[dict[str, Any]], field: str) -> list[dict[str, Any]]:
    """Newest first; missing dates count as the epoch and sort last. Stable."""
    return sorted(items, key=lambda item: parse_timestamp(item.get(field)), reverse=True)


def paginate(items: Sequence[dict[str, Any]], limit: int, offset: int) -> Page:
    """Slice a fully aggregated, sorted list. `hasMore` is exact."""
    total = len(items)
    return Page(
        items=list(items[offset:offset + limit]),
        pagination=Pagination(
            total=total,
            limit=limit,
            offset=offset,
            has_more=total > offset + limit,
        ),
    )


def token_pagination(returned: int, enumerated: int, limit: int, offset: int) -> Pagination:
    """
    Pagination for token enumeration.

    `hasMore` is a heuristic (a full page might mean more tokens exist),
    since enumeration stops at the max-tokens ceiling.
    """
    return Pagination(
        total=enumerated,
        limit=limit,
        offset=offset,
        has_more=returned == limit,
    )
