"""Service layer for content aggregation."""

from .aggregation import AddressTarget, Aggregator, ItemFailed, ItemFetched, ItemResult
from .content import BLOCKCHAIN_METHODS, ContentService

__all__ = [
    "AddressTarget",
    "Aggregator",
    "BLOCKCHAIN_METHODS",
    "ContentService",
    "ItemFailed",
    "ItemFetched",
    "ItemResult",
]
