"""API schema definitions."""

from pagehub.api.schemas.base import APIBaseSchema, APIError, Envelope, ErrorDetail, now_ms
from pagehub.api.schemas.responses import (
    AnyResponse,
    CollectionItemsResponse,
    HealthResponse,
    ObjectResponse,
    PageResponse,
    PublicationsResponse,
    ReadyResponse,
)

__all__ = [
    # Base
    "APIBaseSchema",
    "APIError",
    "Envelope",
    "ErrorDetail",
    "now_ms",
    # Responses
    "AnyResponse",
    "CollectionItemsResponse",
    "HealthResponse",
    "ObjectResponse",
    "PageResponse",
    "PublicationsResponse",
    "ReadyResponse",
]
