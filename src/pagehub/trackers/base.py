"""Capability interfaces implemented by chain adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Protocol

from pagehub.core.models import AuthorRecord


class ContentTracker(ABC):
    """
    Handle on one content contract on one chain.

    Construction must be cheap and perform no I/O; `get_collection_info` is
    the single read used to validate that the contract really is of this
    tracker's content type.
    """

    CONTENT_TYPE: ClassVar[str]

    def __init__(self, address: str, chain: str, content_type: str | None = None) -> None:
        self.address = address
        self.chain = chain
        self.content_type = content_type or self.CONTENT_TYPE

    @abstractmethod
    async def get_collection_info(self) -> dict[str, Any]:
        """Collection-level metadata. Raises when the contract does not validate."""
        ...

    @abstractmethod
    async def fetch_metadata(self, token_id: int) -> dict[str, Any]:
        """Metadata document for one token."""
        ...

    @abstractmethod
    async def get_all_tokens(self, max_tokens: int = 100) -> list[int]:
        """Token ids in the collection, at most `max_tokens` of them."""
        ...

    @abstractmethod
    async def fetch_ownership(self, token_id: int) -> dict[str, Any]:
        ...

    @abstractmethod
    async def fetch_rights(self, token_id: int) -> dict[str, Any]:
        ...

    @abstractmethod
    async def get_tokens_by_owner(self, owner: str, max_tokens: int = 100) -> list[int]:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address!r}, chain={self.chain!r}, type={self.content_type!r})"


class TrackerProvider(Protocol):
    """Builds trackers for (address, content type, chain) candidates."""

    @property
    def registered_types(self) -> list[str]:
        """Formally registered content types, in registration order."""
        ...

    @property
    def known_types(self) -> list[str]:
        """Registered types plus convention-based aliases."""
        ...

    def create(self, address: str, content_type: str, chain: str) -> ContentTracker:
        ...

    async def close(self) -> None:
        ...


class AuthorDirectory(Protocol):
    """Per-chain source of author records and authored content."""

    chain: str

    async def get_author_by_address(self, address: str) -> AuthorRecord | None:
        ...

    async def get_content_by_author(self, address: str) -> list[dict[str, Any]]:
        ...

    async def close(self) -> None:
        ...
