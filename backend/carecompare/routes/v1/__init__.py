"""Versioned API routers mounted under /api/v1."""

from . import health, search

__all__ = ["health", "search"]
