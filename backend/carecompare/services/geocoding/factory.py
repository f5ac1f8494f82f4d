"""Factory for geocoding providers."""

from typing import Optional

from ...core.config import Settings, settings
from .base import GeocodingProvider
from .google_provider import GoogleMapsProvider
from .mapbox_provider import MapboxProvider
from .mock_provider import MockGeocodingProvider


def create_geocoding_provider(
    provider_override: Optional[str] = None,
    config: Optional[Settings] = None,
) -> GeocodingProvider:
    config = config or settings
    name = (provider_override or config.geocoding_provider or "google").lower()
    provider: GeocodingProvider
    if name == "mapbox":
        provider = MapboxProvider(
            config.mapbox_access_token, timeout=config.geocoding_timeout_seconds
        )
    elif name == "mock":
        provider = MockGeocodingProvider()
    else:
        provider = GoogleMapsProvider(
            config.google_maps_api_key, timeout=config.geocoding_timeout_seconds
        )
    return provider
