"""Domain models for registry records, resolved content and pages."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .addresses import normalize_address


def to_camel_case(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


class CamelModel(BaseModel):
    """Base for models serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
    )


class ContentRecord(BaseModel):
    """
    Curated registry entry for a known contract.

    Any extra curated fields in the registry data are kept verbatim.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    address: str = Field(..., description="Contract address as curated")
    chain: str = Field(..., description="Chain the contract lives on")
    type: str = Field(..., description="Content type used to build its tracker")
    name: str | None = Field(default=None, description="Display name")
    featured: bool = Field(default=False, description="Pinned to the top of lists")

    @property
    def normalized_address(self) -> str:
        return normalize_address(self.address)

    def identity(self) -> dict[str, str]:
        return {"address": self.address, "chain": self.chain, "type": self.type}

    def to_dict(self) -> dict[str, Any]:
        """Curated fields as written in the registry, extras included."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ResolvedContent(BaseModel):
    """Outcome of a successful probe: live collection info plus where it was found."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: str
    chain: str
    content_type: str = Field(..., alias="type")
    collection_info: dict[str, Any] = Field(default_factory=dict)

    def identity(self) -> dict[str, str]:
        return {"address": self.address, "chain": self.chain, "type": self.content_type}


class DegradedItem(BaseModel):
    """Placeholder for an address whose fetch failed during aggregation."""

    model_config = ConfigDict(populate_by_name=True)

    address: str
    chain: str | None = None
    error: str
    fetch_failed: Literal[True] = Field(default=True, alias="_fetchFailed")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class DegradedToken(BaseModel):
    """Placeholder for a token whose metadata fetch failed."""

    model_config = ConfigDict(populate_by_name=True)

    token_id: str = Field(..., alias="tokenId")
    error: str
    fetch_failed: Literal[True] = Field(default=True, alias="_fetchFailed")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class AuthorRecord(CamelModel):
    """Author information as reported by a single chain."""

    address: str
    chain: str
    name: str | None = None
    bio: str | None = None
    avatar: str | None = None
    website: str | None = None
    social: dict[str, str] | None = None
    publication_count: int = 0
    last_published_at: str | None = None


class AuthorProfile(CamelModel):
    """Author information merged across every chain the author appears on."""

    address: str
    chains: list[str] = Field(default_factory=list)
    name: str | None = None
    bio: str | None = None
    avatar: str | None = None
    website: str | None = None
    social: dict[str, str] | None = None
    total_publications: int = 0
    last_published_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class Pagination(CamelModel):
    """Offset/limit pagination block."""

    total: int
    limit: int
    offset: int
    has_more: bool


class Page(CamelModel):
    """A page of aggregated items."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    pagination: Pagination


class CollectionItemsPage(Page):
    """Token page for a single collection."""

    collection: dict[str, Any] = Field(default_factory=dict)


class PublicationsPage(Page):
    """Publication page for a single author."""

    author: dict[str, Any] = Field(default_factory=dict)
