"""API route modules."""

from pagehub.api.routes.authors import router as authors_router
from pagehub.api.routes.blockchain import router as blockchain_router
from pagehub.api.routes.books import router as books_router
from pagehub.api.routes.collections import router as collections_router
from pagehub.api.routes.health import router as health_router

__all__ = [
    "authors_router",
    "blockchain_router",
    "books_router",
    "collections_router",
    "health_router",
]
