# backend/carecompare/services/search/retriever.py
"""
Candidate retrieval for procedure-price search.

The only search component that talks to the price store. Candidates come
back unfiltered by distance or price and unsorted.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, List, Optional

from carecompare.repositories.price_repository import PriceRepository
from carecompare.services.geocoding.base import Coordinates

logger = logging.getLogger(__name__)


@dataclass
class SearchCandidate:
    """
    A price record joined with its location, provider, template and category.

    distance is miles from the search origin; None until an origin is known.
    """

    id: str
    price: float
    comments: Optional[str]

    template_id: str
    template_name: str
    template_description: Optional[str]
    category_id: Optional[str]
    category_name: Optional[str]

    location_id: str
    location_name: Optional[str]
    address1: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip_code: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]

    provider_id: str
    provider_name: str
    provider_logo_url: Optional[str] = None

    distance: Optional[float] = None

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(self.latitude, self.longitude)

    @property
    def address(self) -> str:
        if not self.address1:
            return ""
        return f"{self.address1}, {self.city}, {self.state} {self.zip_code}"

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SearchCandidate":
        return cls(
            id=row["id"],
            price=float(row["price"]),
            comments=row.get("comments"),
            template_id=row["template_id"],
            template_name=row.get("template_name") or "",
            template_description=row.get("template_description"),
            category_id=row.get("category_id"),
            category_name=row.get("category_name"),
            location_id=row["location_id"],
            location_name=row.get("location_name"),
            address1=row.get("address1"),
            city=row.get("city"),
            state=row.get("state"),
            zip_code=row.get("zip_code"),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            provider_id=row["provider_id"],
            provider_name=row.get("provider_name") or "",
            provider_logo_url=row.get("provider_logo_url"),
        )


class CandidateRetriever:
    """
    Loads search candidates for a set of matched templates.

    Usage:
        retriever = CandidateRetriever(PriceRepository(db))
        candidates = retriever.fetch_candidates({"tmpl1"}, location_id="loc1")
    """

    def __init__(self, repository: PriceRepository) -> None:
        self.repository = repository

    def fetch_candidates(
        self,
        template_ids: Iterable[str],
        location_id: Optional[str] = None,
        provider_id: Optional[str] = None,
    ) -> List[SearchCandidate]:
        """
        Active price records for the templates, restricted to active locations.

        Args:
            template_ids: Matched template ids
            location_id: Narrow retrieval to one location
            provider_id: Narrow retrieval to one provider's locations

        Returns:
            Candidates with distance left as None
        """
        ids = sorted(set(template_ids))
        if not ids:
            return []
        rows = self.repository.find_active_price_records(
            ids, location_id=location_id, provider_id=provider_id
        )
        candidates = [SearchCandidate.from_row(row) for row in rows]
        logger.debug("Retrieved %d candidates for %d templates", len(candidates), len(ids))
        return candidates
