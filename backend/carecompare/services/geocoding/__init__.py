"""Geocoding providers and the search-origin resolver."""

from .base import Coordinates, GeocodedAddress, GeocodingProvider
from .factory import create_geocoding_provider
from .geocoder import Geocoder, is_postal_code

__all__ = [
    "Coordinates",
    "GeocodedAddress",
    "GeocodingProvider",
    "Geocoder",
    "create_geocoding_provider",
    "is_postal_code",
]
