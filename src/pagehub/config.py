"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PageHubSettings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="PAGEHUB_",
    )

    # Chains
    rpc_urls: dict[str, str] = Field(
        default={
            "ethereum": "https://eth.llamarpc.com",
            "base": "https://mainnet.base.org",
            "optimism": "https://mainnet.optimism.io",
            "polygon": "https://polygon-rpc.com",
            "zora": "https://rpc.zora.energy",
        },
        description="JSON-RPC endpoint per chain",
    )
    indexer_urls: dict[str, str] = Field(
        default_factory=dict,
        description="Content indexer REST endpoint per chain (optional)",
    )
    supported_chains: list[str] = Field(
        default=["ethereum", "base", "optimism", "polygon", "zora"],
        description="Chains probed when none is specified, in priority order",
    )
    rpc_rate_limit_rps: float = Field(
        default=10.0,
        gt=0,
        description="Requests per second per RPC endpoint",
    )

    # Resolution
    fallback_content_types: list[str] = Field(
        default=["alexandria_book", "publication"],
        description="Convention-based content types tried after registered types",
    )
    probe_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds before a single probe counts as failed",
    )
    resolution_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Seconds for a whole resolution before giving up",
    )
    parallel_probes: bool = Field(
        default=False,
        description="Probe all candidates concurrently instead of one at a time",
    )

    # Aggregation
    aggregation_concurrency: int = Field(
        default=5,
        ge=1,
        description="Concurrent per-item fetches during aggregation",
    )
    max_tokens: int = Field(
        default=100,
        ge=1,
        description="Ceiling on token ids enumerated per collection",
    )
    default_page_limit: int = Field(default=20, ge=1)
    max_page_limit: int = Field(default=100, ge=1)

    # Content
    ipfs_gateway: str = Field(
        default="https://ipfs.io/ipfs/",
        description="Gateway used to fetch ipfs:// token metadata",
    )
    registry_path: Path | None = Field(
        default=None,
        description="Directory of <chain>.json registry files (defaults to bundled data)",
    )

    # App settings
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )


@lru_cache
def get_settings() -> PageHubSettings:
    """Get cached settings instance."""
    return PageHubSettings()
