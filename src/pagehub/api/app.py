"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pagehub import __version__
from pagehub.api.errors import register_error_handlers
from pagehub.api.routes import (
    authors_router,
    blockchain_router,
    books_router,
    collections_router,
    health_router,
)
from pagehub.config import PageHubSettings, get_settings
from pagehub.registry.index import RegistryIndex
from pagehub.trackers.registry import AdapterRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Loads the registry and builds adapters on startup; closes adapter
    connections on shutdown.
    """
    settings: PageHubSettings = app.state.settings
    logging.getLogger("pagehub").setLevel(settings.log_level.upper())

    logger.info("Loading content registry...")
    app.state.registry_index = RegistryIndex.from_settings(settings)

    logger.info("Initializing adapters...")
    app.state.adapter_registry = AdapterRegistry.from_settings(settings)

    logger.info(f"Registry loaded with {len(app.state.registry_index)} records")

    yield

    logger.info("Closing adapter connections...")
    await app.state.adapter_registry.close_all()
    logger.info("Adapters closed")


def create_app(
    settings: PageHubSettings | None = None,
    *,
    title: str = "PageHub API",
    description: str = "Multi-chain content resolution and aggregation API",
    version: str = __version__,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings (loaded from environment if not provided)
        title: API title for OpenAPI docs
        description: API description for OpenAPI docs
        version: API version

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=title,
        description=description,
        version=version,
        debug=settings.debug,
        lifespan=lifespan,
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    register_error_handlers(app)

    # Register routes
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(collections_router, prefix="/api/v1")
    app.include_router(books_router, prefix="/api/v1")
    app.include_router(authors_router, prefix="/api/v1")
    app.include_router(blockchain_router, prefix="/api/v1")

    return app


# uvicorn pagehub.api.app:app
app = create_app()
