# backend/carecompare/services/search/provider_search.py
"""
Provider directory search.

Finds providers by name or bio and, when a location resolves, keeps only
providers whose closest active location is within the radius.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import math
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from carecompare.repositories.provider_repository import ProviderRepository
from carecompare.services.geocoding.base import Coordinates
from carecompare.services.geocoding.geocoder import Geocoder
from carecompare.services.search.catalog_matcher import normalize_term
from carecompare.services.search.config import SearchConfig, get_search_config
from carecompare.services.search.distance import haversine_miles
from carecompare.services.search.metrics import record_result_count
from carecompare.services.search.query import clamp_page, validate_radius

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass
class ProviderLocationHit:
    id: str
    name: Optional[str]
    address1: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip_code: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    distance: Optional[float] = None


@dataclass
class ProviderHit:
    id: str
    name: str
    bio: Optional[str]
    logo_url: Optional[str]
    website: Optional[str]
    locations: List[ProviderLocationHit] = field(default_factory=list)
    closest_distance: Optional[float] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ProviderHit":
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            bio=row.get("bio"),
            logo_url=row.get("logo_url"),
            website=row.get("website"),
            locations=[ProviderLocationHit(**loc) for loc in row.get("locations", [])],
        )


@dataclass
class ProviderSearchOutcome:
    items: List[ProviderHit]
    total: int
    pages: int
    page: int
    page_size: int
    origin: Optional[Coordinates] = None
    geocode_failed: bool = False


def attach_closest_distance(hit: ProviderHit, origin: Coordinates) -> Optional[float]:
    """Set each location's distance and return the provider's minimum."""
    distances = []
    for location in hit.locations:
        if location.latitude is None or location.longitude is None:
            continue
        location.distance = haversine_miles(
            origin, Coordinates(location.latitude, location.longitude)
        )
        distances.append(location.distance)
    hit.closest_distance = min(distances) if distances else None
    return hit.closest_distance


class ProviderSearchService:
    def __init__(
        self,
        repository: ProviderRepository,
        geocoder: Geocoder,
        config: Optional[SearchConfig] = None,
    ) -> None:
        self.repository = repository
        self.geocoder = geocoder
        self.config = config or get_search_config()

    @classmethod
    def from_session(
        cls, db: "Session", geocoder: Geocoder, config: Optional[SearchConfig] = None
    ) -> "ProviderSearchService":
        return cls(ProviderRepository(db), geocoder, config)

    async def search_providers(
        self,
        text: Optional[str] = None,
        location: Optional[str] = None,
        radius: Optional[float] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> ProviderSearchOutcome:
        """
        Search the provider directory.

        With a resolved origin, providers are ordered by their closest
        location; providers with no location in range are dropped. Without
        one, providers are ordered by name.

        Raises:
            ValidationException: radius is not positive
        """
        radius_miles = validate_radius(radius, self.config.default_radius_miles)
        page_value, size_value = clamp_page(page, page_size, self.config)
        location_text = (location or "").strip() or None

        origin = await self.geocoder.resolve(location_text) if location_text else None
        rows = await asyncio.to_thread(
            self.repository.find_active_providers, normalize_term(text)
        )
        hits = [ProviderHit.from_row(row) for row in rows]

        if origin is not None:
            in_range = []
            for hit in hits:
                closest = attach_closest_distance(hit, origin)
                if closest is not None and closest <= radius_miles:
                    in_range.append(hit)
            hits = sorted(in_range, key=lambda h: h.id)
            hits.sort(key=lambda h: h.closest_distance)
        else:
            hits = sorted(hits, key=lambda h: h.id)
            hits.sort(key=lambda h: h.name.casefold())

        total = len(hits)
        pages = math.ceil(total / size_value) if total else 0
        start = (page_value - 1) * size_value
        record_result_count("providers", total, origin is not None)
        logger.info(
            "Provider search text=%r location=%r: %d providers", text, location_text, total
        )

        return ProviderSearchOutcome(
            items=hits[start : start + size_value],
            total=total,
            pages=pages,
            page=page_value,
            page_size=size_value,
            origin=origin,
            geocode_failed=location_text is not None and origin is None,
        )
