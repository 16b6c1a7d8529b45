"""FastAPI web API."""

from pagehub.api.app import create_app

__all__ = ["create_app"]
