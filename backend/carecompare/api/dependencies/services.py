# backend/carecompare/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected. Credentials are read
from settings once, here, and handed to the Geocoder at construction.
"""

from functools import lru_cache
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.config import settings
from ...services.geocoding import Geocoder, create_geocoding_provider
from ...services.search.config import get_search_config
from ...services.search.provider_search import ProviderSearchService
from ...services.search.ranker import PriceSearchService
from .database import get_db

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_geocoder() -> Geocoder:
    """Get singleton geocoder configured from settings."""
    provider = create_geocoding_provider(config=settings)
    logger.info("Using %s geocoding provider", provider.name)
    return Geocoder(
        provider,
        fallback_postal_codes=get_search_config().fallback_postal_codes,
        timeout_seconds=settings.geocoding_timeout_seconds,
    )


def get_price_search_service(
    db: Session = Depends(get_db),
    geocoder: Geocoder = Depends(get_geocoder),
) -> PriceSearchService:
    return PriceSearchService.from_session(db, geocoder, config=get_search_config())


def get_provider_search_service(
    db: Session = Depends(get_db),
    geocoder: Geocoder = Depends(get_geocoder),
) -> ProviderSearchService:
    return ProviderSearchService.from_session(db, geocoder, config=get_search_config())
