"""Chain adapters (content trackers) and their transports."""

from .base import AuthorDirectory, ContentTracker, TrackerProvider
from .erc721 import BookTracker, Erc721Tracker
from .factory import TrackerFactory
from .indexer import ChainIndexer
from .registry import AdapterRegistry
from .transport import (
    AsyncRateLimiter,
    HttpTransport,
    JsonRpcTransport,
    RateLimitConfig,
    TransportConfig,
)

__all__ = [
    "AdapterRegistry",
    "AsyncRateLimiter",
    "AuthorDirectory",
    "BookTracker",
    "ChainIndexer",
    "ContentTracker",
    "Erc721Tracker",
    "HttpTransport",
    "JsonRpcTransport",
    "RateLimitConfig",
    "TrackerFactory",
    "TrackerProvider",
    "TransportConfig",
]
