"""Base schema configuration and response envelopes for API models."""

from __future__ import annotations

import time
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from pagehub.core.models import to_camel_case

DataT = TypeVar("DataT")


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class APIBaseSchema(BaseModel):
    """
    Base schema for all API models.

    Configured with camelCase aliases for JavaScript-friendly JSON serialization.
    """

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(APIBaseSchema, Generic[DataT]):
    """Successful response wrapper."""

    success: Literal[True] = True
    data: DataT
    timestamp: int = Field(default_factory=now_ms)


class ErrorDetail(APIBaseSchema):
    """Error detail for API responses."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class APIError(APIBaseSchema):
    """Standard API error response."""

    success: Literal[False] = False
    error: ErrorDetail
    timestamp: int = Field(default_factory=now_ms)
