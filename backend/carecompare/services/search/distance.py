# backend/carecompare/services/search/distance.py
"""Great-circle distance between two coordinates."""
from __future__ import annotations

import math

from carecompare.core.constants import EARTH_RADIUS_MILES
from carecompare.services.geocoding.base import Coordinates


def haversine_miles(a: Coordinates, b: Coordinates) -> float:
    """
    Distance in miles between two points using the haversine formula.

    Symmetric and deterministic; identical points return 0.0.
    """
    lat1, lng1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lng2 = math.radians(b.latitude), math.radians(b.longitude)
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    # Clamp: rounding can push h a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(min(1.0, h)))
