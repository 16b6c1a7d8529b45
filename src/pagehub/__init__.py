"""PageHub - multi-chain content resolution and aggregation."""

from pagehub.client import PageHubClient, get_collection
from pagehub.core.models import AuthorProfile, ContentRecord, Page, ResolvedContent
from pagehub.core.types import ALL_CHAINS, Chain, ContentType, ResolutionStatus
from pagehub.resolution.strategy import ResolutionOutcome, ResolutionStrategy

__version__ = "0.1.0"
__all__ = [
    # Client
    "PageHubClient",
    "get_collection",
    # Types
    "ALL_CHAINS",
    "Chain",
    "ContentType",
    "ResolutionStatus",
    # Models
    "AuthorProfile",
    "ContentRecord",
    "Page",
    "ResolvedContent",
    # Resolution
    "ResolutionOutcome",
    "ResolutionStrategy",
    # Version
    "__version__",
]
