"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from pagehub.config import PageHubSettings
from pagehub.config import get_settings as load_settings
from pagehub.registry.index import RegistryIndex
from pagehub.services.content import ContentService
from pagehub.trackers.registry import AdapterRegistry


def get_settings(request: Request) -> PageHubSettings:
    """Settings the app was started with, else the cached environment settings."""
    return getattr(request.app.state, "settings", None) or load_settings()


async def get_registry_index(request: Request) -> RegistryIndex:
    """Get registry index from app state."""
    return request.app.state.registry_index


async def get_adapter_registry(request: Request) -> AdapterRegistry:
    """Get adapter registry from app state."""
    return request.app.state.adapter_registry


async def get_content_service(
    registry: RegistryIndex = Depends(get_registry_index),
    adapters: AdapterRegistry = Depends(get_adapter_registry),
    settings: PageHubSettings = Depends(get_settings),
) -> ContentService:
    """Get content service with all dependencies."""
    return ContentService(registry, adapters, settings)


# Type aliases for cleaner dependency injection
Settings = Annotated[PageHubSettings, Depends(get_settings)]
Registry = Annotated[RegistryIndex, Depends(get_registry_index)]
Adapters = Annotated[AdapterRegistry, Depends(get_adapter_registry)]
Content = Annotated[ContentService, Depends(get_content_service)]


def split_csv(value: str | None) -> list[str]:
    """Comma-separated query value to a list, blanks dropped."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
