"""FastAPI dependency providers."""

from .database import get_db
from .services import get_geocoder, get_price_search_service, get_provider_search_service

__all__ = [
    "get_db",
    "get_geocoder",
    "get_price_search_service",
    "get_provider_search_service",
]
