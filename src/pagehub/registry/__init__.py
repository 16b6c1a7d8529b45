"""Curated content registry."""

from .index import RegistryIndex

__all__ = ["RegistryIndex"]
