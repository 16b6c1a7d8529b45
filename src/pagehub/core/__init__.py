"""Core types, models, and utilities."""

from .addresses import ContentId, EvmAddress, is_evm_address, normalize_address, parse_token_id
from .exceptions import (
    AdapterUnavailableError,
    MissingParameterError,
    NotFoundError,
    PageHubError,
    RateLimitError,
    ResolutionNotFound,
    RpcError,
    TrackerError,
    UnknownContentTypeError,
    UnsupportedChainError,
    ValidationError,
)
from .models import (
    AuthorProfile,
    AuthorRecord,
    CollectionItemsPage,
    ContentRecord,
    DegradedItem,
    DegradedToken,
    Page,
    Pagination,
    PublicationsPage,
    ResolvedContent,
)
from .normalization import collation_key, normalize_text, parse_timestamp
from .types import (
    ALL_CHAINS,
    BOOK_CONTENT_TYPES,
    CandidateSource,
    Chain,
    ContentType,
    ErrorCode,
    ResolutionStatus,
)

__all__ = [
    # Types
    "ALL_CHAINS",
    "BOOK_CONTENT_TYPES",
    "CandidateSource",
    "Chain",
    "ContentType",
    "ErrorCode",
    "ResolutionStatus",
    # Addresses
    "ContentId",
    "EvmAddress",
    "is_evm_address",
    "normalize_address",
    "parse_token_id",
    # Models
    "AuthorProfile",
    "AuthorRecord",
    "CollectionItemsPage",
    "ContentRecord",
    "DegradedItem",
    "DegradedToken",
    "Page",
    "Pagination",
    "PublicationsPage",
    "ResolvedContent",
    # Normalization
    "collation_key",
    "normalize_text",
    "parse_timestamp",
    # Exceptions
    "AdapterUnavailableError",
    "MissingParameterError",
    "NotFoundError",
    "PageHubError",
    "RateLimitError",
    "ResolutionNotFound",
    "RpcError",
    "TrackerError",
    "UnknownContentTypeError",
    "UnsupportedChainError",
    "ValidationError",
]
