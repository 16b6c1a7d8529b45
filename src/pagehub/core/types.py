"""Core enums and type definitions."""

from enum import StrEnum


class Chain(StrEnum):
    """Blockchains the hub knows how to read from."""

    ETHEREUM = "ethereum"
    BASE = "base"
    OPTIMISM = "optimism"
    POLYGON = "polygon"
    ZORA = "zora"


# Sentinel accepted wherever a chain filter is optional
ALL_CHAINS = "all"


class ContentType(StrEnum):
    """Content encodings with a tracker implementation."""

    NFT = "nft"
    BOOK = "book"
    # Recognized by naming convention, not formally registered
    ALEXANDRIA_BOOK = "alexandria_book"
    PUBLICATION = "publication"


BOOK_CONTENT_TYPES: tuple[str, ...] = (ContentType.BOOK, ContentType.ALEXANDRIA_BOOK)


class ResolutionStatus(StrEnum):
    """Status of a single probe or a whole resolution."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"
    TIMEOUT = "timeout"


class CandidateSource(StrEnum):
    """Which step of the resolution plan produced a candidate."""

    TYPE_HINT = "type_hint"
    REGISTRY = "registry"
    REGISTERED_TYPE = "registered_type"
    FALLBACK_TYPE = "fallback_type"


class ErrorCode(StrEnum):
    """Outcome codes surfaced to the transport layer."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_PARAM = "INVALID_PARAM"
    MISSING_PARAM = "MISSING_PARAM"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
