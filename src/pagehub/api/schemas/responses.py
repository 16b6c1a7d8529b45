"""Response schemas for API endpoints."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from pagehub.api.schemas.base import APIBaseSchema, Envelope
from pagehub.core.models import CollectionItemsPage, Page, PublicationsPage


class HealthResponse(APIBaseSchema):
    """Health check response."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    services: dict[str, Literal["up", "down", "unknown"]] = Field(default_factory=dict)


class ReadyResponse(APIBaseSchema):
    ready: bool


PageResponse = Envelope[Page]
CollectionItemsResponse = Envelope[CollectionItemsPage]
PublicationsResponse = Envelope[PublicationsPage]
ObjectResponse = Envelope[dict[str, Any]]
AnyResponse = Envelope[Any]
