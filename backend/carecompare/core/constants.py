"""Application-wide constants for the CareCompare search service."""

from __future__ import annotations

BRAND_NAME = "CareCompare"

API_TITLE = f"{BRAND_NAME} Search API"
API_DESCRIPTION = "Procedure-price search, ranking and price statistics"
API_VERSION = "0.1.0"

# Mean Earth radius used by the haversine distance
EARTH_RADIUS_MILES = 3958.8

# Search defaults
DEFAULT_RADIUS_MILES = 50.0
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Bare US postal code, optionally ZIP+4
POSTAL_CODE_PATTERN = r"^\d{5}(-\d{4})?$"
POSTAL_CODE_COUNTRY_HINT = "USA"

# Coordinates for common ZIP codes, consulted when the upstream geocoder fails
DEFAULT_FALLBACK_POSTAL_CODES: dict[str, tuple[float, float]] = {
    "90210": (34.0736, -118.4004),  # Beverly Hills
    "10001": (40.7501, -73.9996),  # New York City
    "60601": (41.8842, -87.6212),  # Chicago
}

GEOCODE_ERROR_MESSAGE = "Could not geocode the provided location"

# Only providers with a paid-up subscription are listed in the directory
ACTIVE_SUBSCRIPTION_STATUS = "ACTIVE"
