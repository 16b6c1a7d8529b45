"""ERC-721 content trackers read over JSON-RPC."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
from typing import Any, ClassVar
from urllib.parse import unquote

from pagehub.core.addresses import EvmAddress
from pagehub.core.exceptions import RpcError, TrackerError
from pagehub.core.types import ContentType
from pagehub.trackers import abi
from pagehub.trackers.abi import AbiDecodeError
from pagehub.trackers.base import ContentTracker
from pagehub.trackers.transport import HttpTransport, JsonRpcTransport

logger = logging.getLogger(__name__)

ROYALTY_BASIS = 10_000


class Erc721Tracker(ContentTracker):
    """
    Generic ERC-721 collection.

    Validation requires `supportsInterface(0x80ac58cd)` to return true.
    Token metadata is fetched from `tokenURI`, which may be an `ipfs://`,
    `ar://`, `data:` or plain http(s) URI.
    """

    CONTENT_TYPE: ClassVar[str] = ContentType.NFT
    FORMAT: ClassVar[str] = "nft"

    def __init__(
        self,
        address: str,
        chain: str,
        rpc: JsonRpcTransport,
        content_fetcher: HttpTransport,
        ipfs_gateway: str = "https://ipfs.io/ipfs/",
        content_type: str | None = None,
    ) -> None:
        # Raises ValueError for a malformed address, which fails the probe
        self.contract = EvmAddress.parse(address)
        super().__init__(self.contract.value, chain, content_type)
        self.rpc = rpc
        self.content_fetcher = content_fetcher
        self.ipfs_gateway = ipfs_gateway if ipfs_gateway.endswith("/") else ipfs_gateway + "/"

    async def _call(self, selector: str, *words: str) -> str:
        return await self.rpc.eth_call(self.contract.value, abi.encode_call(selector, *words))

    async def _optional_string(self, selector: str) -> str | None:
        try:
            return abi.decode_string(await self._call(selector))
        except (RpcError, AbiDecodeError):
            return None

    async def _optional_uint(self, selector: str, *words: str) -> int | None:
        try:
            return abi.decode_uint(await self._call(selector, *words))
        except (RpcError, AbiDecodeError):
            return None

    async def supports_erc721(self) -> bool:
        data = await self._call(abi.SUPPORTS_INTERFACE, abi.encode_bytes4(abi.ERC721_INTERFACE_ID))
        return abi.decode_bool(data)

    async def get_collection_info(self) -> dict[str, Any]:
        if not await self.supports_erc721():
            raise TrackerError(f"{self.address} on {self.chain} is not an ERC-721 contract")

        name, symbol, total_supply = await asyncio.gather(
            self._optional_string(abi.NAME),
            self._optional_string(abi.SYMBOL),
            self._optional_uint(abi.TOTAL_SUPPLY),
        )
        return {
            "address": self.address,
            "chain": self.chain,
            "type": self.content_type,
            "format": self.FORMAT,
            "name": name,
            "symbol": symbol,
            "totalSupply": total_supply,
        }

    async def get_all_tokens(self, max_tokens: int = 100) -> list[int]:
        total = await self._optional_uint(abi.TOTAL_SUPPLY)
        if not total:
            return []
        count = min(total, max_tokens)

        # Non-enumerable contracts: assume sequential ids starting at 1
        first = await self._optional_uint(abi.TOKEN_BY_INDEX, abi.encode_uint(0))
        if first is None:
            return list(range(1, count + 1))

        rest = await asyncio.gather(
            *(
                self._call(abi.TOKEN_BY_INDEX, abi.encode_uint(index))
                for index in range(1, count)
            )
        )
        return [first, *(abi.decode_uint(data) for data in rest)]

    async def token_uri(self, token_id: int) -> str:
        return abi.decode_string(await self._call(abi.TOKEN_URI, abi.encode_uint(token_id)))

    async def fetch_metadata(self, token_id: int) -> dict[str, Any]:
        uri = await self.token_uri(token_id)
        document = await self._load_document(uri)
        if not isinstance(document, dict):
            raise TrackerError(f"Metadata for token {token_id} is not a JSON object")
        return {"tokenId": str(token_id), "tokenUri": uri, **document}

    async def _load_document(self, uri: str) -> Any:
        if uri.startswith("data:"):
            return self._decode_data_uri(uri)
        return await self.content_fetcher.fetch_json(self.resolve_uri(uri))

    def resolve_uri(self, uri: str) -> str:
        """Map content-addressed URIs to fetchable http(s) URLs."""
        if uri.startswith("ipfs://"):
            path = uri.removeprefix("ipfs://").removeprefix("ipfs/")
            return self.ipfs_gateway + path
        if uri.startswith("ar://"):
            return "https://arweave.net/" + uri.removeprefix("ar://")
        if uri.startswith(("http://", "https://")):
            return uri
        raise TrackerError(f"Unsupported token URI scheme: {uri[:32]}")

    @staticmethod
    def _decode_data_uri(uri: str) -> Any:
        header, _, payload = uri.partition(",")
        try:
            if header.endswith(";base64"):
                return json.loads(base64.b64decode(payload))
            return json.loads(unquote(payload))
        except ValueError as e:
            raise TrackerError(f"Invalid inline metadata: {e}") from e

    async def fetch_ownership(self, token_id: int) -> dict[str, Any]:
        owner = abi.decode_address(await self._call(abi.OWNER_OF, abi.encode_uint(token_id)))
        return {"tokenId": str(token_id), "owner": owner}

    async def fetch_rights(self, token_id: int) -> dict[str, Any]:
        """ERC-2981 royalty info; contracts without it report no royalty."""
        try:
            data = await self._call(
                abi.ROYALTY_INFO, abi.encode_uint(token_id), abi.encode_uint(ROYALTY_BASIS)
            )
            receiver = abi.decode_address(data, 0)
            amount = abi.decode_uint(data, 1)
        except (RpcError, AbiDecodeError):
            return {"tokenId": str(token_id), "royaltyReceiver": None, "royaltyBps": None}
        return {"tokenId": str(token_id), "royaltyReceiver": receiver, "royaltyBps": amount}

    async def get_tokens_by_owner(self, owner: str, max_tokens: int = 100) -> list[int]:
        owner_word = abi.encode_address(owner)
        balance = abi.decode_uint(await self._call(abi.BALANCE_OF, owner_word))
        results = await asyncio.gather(
            *(
                self._call(abi.TOKEN_OF_OWNER_BY_INDEX, owner_word, abi.encode_uint(index))
                for index in range(min(balance, max_tokens))
            )
        )
        return [abi.decode_uint(data) for data in results]


class BookTracker(Erc721Tracker):
    """
    ERC-721 book editions; promotes common book attributes to top-level keys.

    Validation also reads the first token: its metadata must carry a book
    attribute or link an EPUB or PDF file. A collection with no tokens yet
    cannot be told apart from a plain NFT and does not validate as a book.
    """

    CONTENT_TYPE: ClassVar[str] = ContentType.BOOK
    FORMAT: ClassVar[str] = "book"

    BOOK_ATTRIBUTES: ClassVar[frozenset[str]] = frozenset(
        {"author", "publisher", "language", "isbn", "genre", "edition", "pages"}
    )
    BOOK_MEDIA_TYPES: ClassVar[frozenset[str]] = frozenset({"application/epub+zip", "application/pdf"})

    async def get_collection_info(self) -> dict[str, Any]:
        info = await super().get_collection_info()

        token_ids = await self.get_all_tokens(max_tokens=1)
        if not token_ids:
            raise TrackerError(f"{self.address} on {self.chain} has no tokens to identify as a book")
        if not self.looks_like_book(await self.fetch_metadata(token_ids[0])):
            raise TrackerError(f"{self.address} on {self.chain} is not a book collection")
        return info

    @classmethod
    def looks_like_book(cls, metadata: dict[str, Any]) -> bool:
        if any(metadata.get(attribute) for attribute in cls.BOOK_ATTRIBUTES):
            return True
        media_type = str(metadata.get("mimeType") or metadata.get("mime_type") or "").lower()
        link = str(metadata.get("animation_url") or "").lower().split("?")[0]
        return media_type in cls.BOOK_MEDIA_TYPES or link.endswith((".epub", ".pdf"))

    async def fetch_metadata(self, token_id: int) -> dict[str, Any]:
        metadata = await super().fetch_metadata(token_id)
        metadata.setdefault("title", metadata.get("name"))

        for attribute in metadata.get("attributes") or []:
            if not isinstance(attribute, dict):
                continue
            trait = str(attribute.get("trait_type", "")).strip().lower()
            if trait in self.BOOK_ATTRIBUTES:
                metadata.setdefault(trait, attribute.get("value"))
        return metadata
