"""Content service: the operations exposed to the API and the client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pagehub.core.addresses import ContentId, normalize_address, parse_token_id
from pagehub.core.exceptions import (
    MissingParameterError,
    NotFoundError,
    PageHubError,
    ValidationError,
)
from pagehub.core.models import CollectionItemsPage, Page, PublicationsPage
from pagehub.core.types import ALL_CHAINS, BOOK_CONTENT_TYPES
from pagehub.registry.index import RegistryIndex
from pagehub.resolution.merge import FROM_REGISTRY, merge_content, registry_fallback
from pagehub.resolution.strategy import ResolutionStrategy
from pagehub.services.aggregation import (
    AddressTarget,
    Aggregator,
    ItemFailed,
    ItemFetched,
    items_of,
    paginate,
    sort_by_date_desc,
    sort_featured_then_name,
    token_pagination,
)
from pagehub.trackers.base import ContentTracker
from pagehub.trackers.registry import AdapterRegistry

if TYPE_CHECKING:
    from pagehub.config import PageHubSettings

logger = logging.getLogger(__name__)

BLOCKCHAIN_METHODS = (
    "info",
    "collectionInfo",
    "metadata",
    "tokens",
    "ownership",
    "rights",
    "ownerTokens",
    "checkOwnership",
    "batch",
)
MAX_BATCH_SIZE = 20
# Collections without enumerable tokens usually start at 1
REPRESENTATIVE_TOKEN_ID = 1
ENUMERATION_ERROR = "_enumerationError"


class ContentService:
    """
    Collections, books, authors and raw blockchain reads.

    Single-item operations raise `NotFoundError` when resolution is
    exhausted; list operations always return a page, degrading failed items
    in place.
    """

    def __init__(
        self,
        registry: RegistryIndex,
        adapters: AdapterRegistry,
        settings: PageHubSettings,
    ) -> None:
        """
        Initialize the content service.

        Args:
            registry: Curated registry index
            adapters: Tracker factory and author directories
            settings: Limits and resolution configuration
        """
        self.registry = registry
        self.adapters = adapters
        self.settings = settings
        self.strategy = ResolutionStrategy.from_settings(registry, adapters.factory, settings)
        self.aggregator = Aggregator(
            self.strategy,
            adapters.author_directories,
            concurrency=settings.aggregation_concurrency,
            call_timeout=settings.probe_timeout,
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def _page_params(self, limit: int | None, offset: int | None) -> tuple[int, int]:
        limit = self.settings.default_page_limit if limit is None else limit
        offset = 0 if offset is None else offset
        if limit < 1 or limit > self.settings.max_page_limit:
            raise ValidationError(
                f"limit must be between 1 and {self.settings.max_page_limit}",
                details={"limit": limit},
            )
        if offset < 0:
            raise ValidationError("offset must not be negative", details={"offset": offset})
        return limit, offset

    @staticmethod
    def _require_addresses(addresses: Sequence[str] | None, name: str = "addresses") -> list[str]:
        cleaned = [a.strip() for a in addresses or [] if a and a.strip()]
        if not cleaned:
            raise MissingParameterError(f"{name} are required")
        return cleaned

    def _chain_for(self, chains: Sequence[str], index: int) -> str | None:
        """Per-address chain hint: same position, else the first chain, else all."""
        if index < len(chains) and chains[index]:
            return self.strategy.validate_chain(chains[index])
        if chains and chains[0]:
            return self.strategy.validate_chain(chains[0])
        return None

    # =========================================================================
    # Collections
    # =========================================================================

    async def list_collections(
        self,
        chain: str | None = ALL_CHAINS,
        addresses: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Page:
        """
        List collections, featured first then by name.

        Without explicit addresses every registry record on the chain (or on
        all chains) is aggregated.
        """
        limit, offset = self._page_params(limit, offset)
        chain_hint = self.strategy.validate_chain(chain)

        if addresses:
            targets = [
                AddressTarget(address, chain_hint)
                for address in self._require_addresses(addresses)
            ]
        else:
            targets = [
                AddressTarget(record.address, record.chain)
                for record in self.registry.list_by_chain(chain_hint or ALL_CHAINS)
            ]

        results = await self.aggregator.resolve_many(targets)
        return paginate(sort_featured_then_name(items_of(results)), limit, offset)

    async def get_collection_details(
        self,
        address: str,
        chain: str | None = None,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        """
        Resolve one collection and merge it with its registry record.

        A curated address whose on-chain read failed is still returned,
        tagged `_fromRegistry`.
        """
        outcome = await self.strategy.resolve(address, chain, content_type)
        if not outcome.found and outcome.record is not None:
            return registry_fallback(outcome.record, outcome.last_error or "Not found on chain")
        outcome.require()
        return merge_content(outcome.record, outcome.resolved)

    async def get_collection_items(
        self,
        address: str,
        chain: str | None = None,
        content_type: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> CollectionItemsPage:
        """
        Token metadata for one page of a collection's tokens.

        A collection that resolved but whose tokens could not be enumerated
        yields an empty page with `_enumerationError` on the collection.
        """
        limit, offset = self._page_params(limit, offset)
        outcome = await self.strategy.resolve(address, chain, content_type)
        resolution = outcome.require()
        tracker = resolution.tracker
        collection: dict[str, Any] = (outcome.record or outcome.resolved).identity()

        try:
            token_ids = await self.aggregator.bounded(
                tracker.get_all_tokens(max_tokens=self.settings.max_tokens), "Token enumeration"
            )
        except PageHubError as e:
            logger.warning(f"Token enumeration for {tracker.address} failed: {e}")
            return CollectionItemsPage(
                items=[],
                pagination=token_pagination(0, 0, limit, offset),
                collection={**collection, ENUMERATION_ERROR: str(e)},
            )

        page_ids = token_ids[offset:offset + limit]
        items = items_of(await self.aggregator.tokens(tracker, page_ids))
        return CollectionItemsPage(
            items=items,
            pagination=token_pagination(len(items), len(token_ids), limit, offset),
            collection=collection,
        )

    # =========================================================================
    # Books
    # =========================================================================

    async def list_books(
        self,
        addresses: Sequence[str] | None,
        chains: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Page:
        """Book details for each address; failed books degrade in place."""
        limit, offset = self._page_params(limit, offset)
        addresses = self._require_addresses(addresses, "Book addresses")
        chains = list(chains or [])
        targets = [
            AddressTarget(address, self._chain_for(chains, index))
            for index, address in enumerate(addresses)
        ]

        results = await self.aggregator.resolve_many(
            targets, type_scope=BOOK_CONTENT_TYPES, with_first_token=True
        )
        return paginate(sort_featured_then_name(items_of(results)), limit, offset)

    async def featured_books(
        self,
        addresses: Sequence[str] | None,
        chains: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> Page:
        """First page of the given books, each marked featured."""
        addresses = self._require_addresses(addresses, "Featured book addresses")
        page = await self.list_books(addresses, chains, limit, 0)
        page.items = [{**item, "featured": True} for item in page.items]
        return page

    async def get_book_details(self, book_id: str, chain: str | None = None) -> dict[str, Any]:
        """
        Details for one book.

        Args:
            book_id: `chain:address`, or a bare address with `chain` given
            chain: Chain for a bare address

        Raises:
            MissingParameterError: no chain in the id or the arguments
            NotFoundError: not a book on that chain
        """
        content_id = ContentId.parse(book_id, default_chain=chain)
        if not content_id.chain:
            raise MissingParameterError("Chain parameter is required")
        if not content_id.address:
            raise MissingParameterError("Book address is required")

        result = await self.aggregator.resolve_item(
            AddressTarget(content_id.address, self.strategy.validate_chain(content_id.chain)),
            type_scope=BOOK_CONTENT_TYPES,
            with_first_token=True,
        )
        match result:
            case ItemFetched(item=item):
                return item
            case ItemFailed(item=item) if item.get(FROM_REGISTRY):
                return item
            case _:
                raise NotFoundError("Book not found", details={"address": content_id.address})

    # =========================================================================
    # Authors
    # =========================================================================

    async def get_author_details(self, address: str) -> dict[str, Any]:
        if not address or not address.strip():
            raise MissingParameterError("Author address is required")
        profile = await self.aggregator.author_profile(address.strip())
        if profile is None:
            raise NotFoundError("Author not found", details={"address": address})
        return profile.to_dict()

    async def get_author_publications(
        self,
        address: str,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PublicationsPage:
        """Publications across every chain, newest first."""
        limit, offset = self._page_params(limit, offset)
        if not address or not address.strip():
            raise MissingParameterError("Author address is required")
        address = address.strip()

        publications = await self.aggregator.author_publications(address)
        page = paginate(publications, limit, offset)
        return PublicationsPage(
            items=page.items,
            pagination=page.pagination,
            author={"address": address, "publicationCount": len(publications)},
        )

    async def list_authors(
        self,
        addresses: Sequence[str] | None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Page:
        """Merged author profiles, most recently published first."""
        limit, offset = self._page_params(limit, offset)
        addresses = self._require_addresses(addresses, "Author addresses")
        results = await self.aggregator.authors(addresses)
        return paginate(sort_by_date_desc(items_of(results), "lastPublishedAt"), limit, offset)

    # =========================================================================
    # Blockchain passthrough
    # =========================================================================

    async def blockchain_request(
        self,
        chain: str,
        address: str,
        method: str = "info",
        params: Sequence[str] = (),
        content_type: str | None = None,
        *,
        owner: str | None = None,
        include_ownership: bool = False,
    ) -> Any:
        """
        Call one tracker method on a resolved contract.

        Methods: info, collectionInfo, metadata/{tokenId}, tokens[/{max}],
        ownership/{tokenId}, rights/{tokenId}, ownerTokens/{owner},
        checkOwnership/{tokenId}[/{owner}] and batch/{id,id,...}.

        Args:
            owner: Address to check for `checkOwnership` when not in `params`
            include_ownership: Add each token's owner to `batch` items
        """
        method = method or "info"
        if method not in BLOCKCHAIN_METHODS:
            raise ValidationError(
                f"Unknown method: {method}",
                details={"supported": list(BLOCKCHAIN_METHODS)},
            )
        chain_hint = self.strategy.validate_chain(chain)
        if chain_hint is None:
            raise MissingParameterError("A specific chain is required")

        # Argument errors surface before any chain read
        argument = _method_argument(method, params, self.settings.max_tokens, owner)

        outcome = await self.strategy.resolve(address, chain_hint, content_type)
        resolution = outcome.require()
        tracker = resolution.tracker
        identity = {
            "address": outcome.address,
            "chain": resolution.chain,
            "type": resolution.content_type,
        }
        bounded = self.aggregator.bounded

        match method:
            case "info":
                return {**resolution.collection_info, **identity}
            case "collectionInfo":
                return await self._collection_info(tracker, {**resolution.collection_info, **identity})
            case "metadata":
                return await bounded(tracker.fetch_metadata(argument), f"Metadata for token {argument}")
            case "tokens":
                token_ids = await bounded(tracker.get_all_tokens(max_tokens=argument), "Token enumeration")
                return [str(token_id) for token_id in token_ids]
            case "ownership":
                return await bounded(tracker.fetch_ownership(argument), f"Owner of token {argument}")
            case "rights":
                return await bounded(tracker.fetch_rights(argument), f"Rights for token {argument}")
            case "ownerTokens":
                token_ids = await bounded(tracker.get_tokens_by_owner(argument), "Owner enumeration")
                return [str(token_id) for token_id in token_ids]
            case "checkOwnership":
                token_id, candidate = argument
                ownership = await bounded(tracker.fetch_ownership(token_id), f"Owner of token {token_id}")
                current = str(ownership.get("owner") or "")
                return {
                    "tokenId": str(token_id),
                    "owner": candidate,
                    "owned": normalize_address(current) == normalize_address(candidate),
                }
            case "batch":
                token_ids, requested = argument
                items = await self._batch_items(tracker, token_ids, include_ownership)
                return {
                    **identity,
                    "items": items,
                    "count": len(items),
                    "request": {"requested": requested, "processed": len(token_ids)},
                }

    async def _collection_info(self, tracker: ContentTracker, info: dict[str, Any]) -> dict[str, Any]:
        """Collection info plus the metadata of a representative token."""
        try:
            token_ids = await self.aggregator.bounded(
                tracker.get_all_tokens(max_tokens=1), "Token enumeration"
            )
        except PageHubError as e:
            logger.debug(f"No token enumeration for {tracker.address}: {e}")
            token_ids = []
        token_id = token_ids[0] if token_ids else REPRESENTATIVE_TOKEN_ID
        result = await self.aggregator.fetch_token(tracker, token_id)
        return {
            **info,
            "representativeTokenId": str(token_id),
            "representativeMetadata": result.item,
        }

    async def _batch_items(
        self,
        tracker: ContentTracker,
        token_ids: Sequence[int],
        include_ownership: bool,
    ) -> list[dict[str, Any]]:
        items = items_of(await self.aggregator.tokens(tracker, token_ids))
        if not include_ownership:
            return items

        async def with_owner(token_id: int, item: dict[str, Any]) -> dict[str, Any]:
            try:
                ownership = await self.aggregator.bounded(
                    tracker.fetch_ownership(token_id), f"Owner of token {token_id}"
                )
            except PageHubError as e:
                return {**item, "_ownershipError": str(e)}
            return {**item, "owner": ownership.get("owner")}

        return list(
            await asyncio.gather(*(with_owner(t, item) for t, item in zip(token_ids, items)))
        )


def _method_argument(
    method: str,
    params: Sequence[str],
    max_tokens: int,
    owner: str | None = None,
) -> Any:
    first = params[0] if params else None

    if method in ("info", "collectionInfo"):
        return None

    if method == "tokens":
        if not first:
            return max_tokens
        try:
            value = int(first)
        except ValueError:
            raise ValidationError(f"Invalid token count: {first}") from None
        if value < 1:
            raise ValidationError(f"Invalid token count: {first}")
        return value

    if method == "ownerTokens":
        if not first:
            raise MissingParameterError("Owner address is required")
        return first

    if method == "batch":
        raw = [part.strip() for param in params for part in param.split(",") if part.strip()]
        if not raw:
            raise MissingParameterError("Token IDs are required for batch")
        return [_token_id(value) for value in raw[:MAX_BATCH_SIZE]], len(raw)

    if not first:
        raise MissingParameterError(f"Token ID is required for {method}")
    token_id = _token_id(first)

    if method == "checkOwnership":
        candidate = params[1] if len(params) > 1 else owner
        if not candidate:
            raise MissingParameterError("Owner address is required for checkOwnership")
        return token_id, candidate

    return token_id


def _token_id(value: str) -> int:
    try:
        return parse_token_id(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
