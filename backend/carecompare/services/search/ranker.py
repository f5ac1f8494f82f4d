# backend/carecompare/services/search/ranker.py
"""
Search orchestration for procedure prices.

Pipeline (strictly in this order, per request):
    geocode -> match templates -> retrieve -> distance filter -> price filter
    -> statistics -> sort -> page

Statistics are computed over the filtered set before sorting and paging,
so page number and page size never change them.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import math
import time
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from carecompare.core.exceptions import NotFoundException
from carecompare.repositories.catalog_repository import CatalogRepository
from carecompare.repositories.price_repository import PriceRepository
from carecompare.services.geocoding.base import Coordinates
from carecompare.services.geocoding.geocoder import Geocoder
from carecompare.services.search.catalog_matcher import CatalogMatcher
from carecompare.services.search.config import SearchConfig, get_search_config
from carecompare.services.search.distance import haversine_miles
from carecompare.services.search.metrics import record_result_count, record_stage_latency
from carecompare.services.search.query import SearchQuery, SortDirection, SortKey, validate_radius
from carecompare.services.search.retriever import CandidateRetriever, SearchCandidate
from carecompare.services.search.statistics import PriceStatistics, summarize

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass
class SearchResultPage:
    """One page of the filtered, sorted candidate list."""

    items: List[SearchCandidate]
    total: int
    pages: int
    page: int
    page_size: int
    query: SearchQuery


@dataclass
class SearchOutcome:
    page: SearchResultPage
    statistics: Optional[PriceStatistics]
    origin: Optional[Coordinates] = None
    # A location was supplied but could not be resolved
    geocode_failed: bool = False


@dataclass
class TemplateSummary:
    id: str
    name: str
    description: Optional[str]
    category_id: Optional[str]
    category_name: Optional[str]


@dataclass
class StatsOutcome:
    # providers_in_range counts in-range price records, so a provider with
    # several locations in range is counted once per location.
    template: TemplateSummary
    statistics: Optional[PriceStatistics]
    radius_miles: float
    origin: Optional[Coordinates] = None
    location_text: Optional[str] = None
    providers_in_range: Optional[int] = None
    geocode_failed: bool = False


def apply_distance_filter(
    candidates: Sequence[SearchCandidate],
    origin: Coordinates,
    radius_miles: float,
) -> List[SearchCandidate]:
    """
    Attach distance from origin and keep candidates within the radius.

    Candidates without coordinates cannot be distance-filtered and are
    dropped once a radius filter is active.
    """
    kept: List[SearchCandidate] = []
    for candidate in candidates:
        coords = candidate.coordinates
        if coords is None:
            continue
        candidate.distance = haversine_miles(origin, coords)
        if candidate.distance <= radius_miles:
            kept.append(candidate)
    return kept


def apply_price_filter(
    candidates: Sequence[SearchCandidate],
    price_min: Optional[float] = None,
    price_max: Optional[float] = None,
) -> List[SearchCandidate]:
    """Inclusive price floor/ceiling."""
    return [
        c
        for c in candidates
        if (price_min is None or c.price >= price_min)
        and (price_max is None or c.price <= price_max)
    ]


def sort_candidates(
    candidates: Sequence[SearchCandidate],
    sort_key: SortKey,
    direction: SortDirection,
    has_origin: bool,
) -> List[SearchCandidate]:
    """
    Order candidates by the requested key; ties break by candidate id.

    Distance ordering without an origin falls back to name ascending.
    """
    if sort_key is SortKey.DISTANCE and not has_origin:
        sort_key, direction = SortKey.NAME, SortDirection.ASC

    # Stable sorts: id first, then the primary key (reverse keeps tie order)
    ordered = sorted(candidates, key=lambda c: c.id)
    if sort_key is SortKey.PRICE:
        ordered.sort(key=lambda c: c.price, reverse=direction is SortDirection.DESC)
    elif sort_key is SortKey.DISTANCE:
        ordered.sort(
            key=lambda c: c.distance if c.distance is not None else math.inf,
            reverse=direction is SortDirection.DESC,
        )
    else:
        ordered.sort(
            key=lambda c: c.template_name.casefold(),
            reverse=direction is SortDirection.DESC,
        )
    return ordered


def paginate(
    items: Sequence[SearchCandidate], page: int, page_size: int
) -> Tuple[List[SearchCandidate], int, int]:
    """
    Slice one page out of the full ordered list.

    Returns:
        (page items, total count, total pages); a page past the end is empty
    """
    total = len(items)
    pages = math.ceil(total / page_size) if total else 0
    start = (page - 1) * page_size
    return list(items[start : start + page_size]), total, pages


class PriceSearchService:
    """
    Orchestrates procedure-price search and price statistics.

    Usage:
        service = PriceSearchService.from_session(db, geocoder)
        outcome = await service.search(SearchQuery.build(procedure_text="MRI"))
    """

    def __init__(
        self,
        catalog_matcher: CatalogMatcher,
        retriever: CandidateRetriever,
        geocoder: Geocoder,
        catalog_repository: Optional[CatalogRepository] = None,
        config: Optional[SearchConfig] = None,
    ) -> None:
        self.catalog_matcher = catalog_matcher
        self.retriever = retriever
        self.geocoder = geocoder
        self.catalog_repository = catalog_repository or catalog_matcher.repository
        self.config = config or get_search_config()

    @classmethod
    def from_session(
        cls,
        db: "Session",
        geocoder: Geocoder,
        config: Optional[SearchConfig] = None,
    ) -> "PriceSearchService":
        catalog_repository = CatalogRepository(db)
        return cls(
            catalog_matcher=CatalogMatcher(catalog_repository),
            retriever=CandidateRetriever(PriceRepository(db)),
            geocoder=geocoder,
            catalog_repository=catalog_repository,
            config=config,
        )

    async def _resolve_origin(
        self, location_text: Optional[str], operation: str
    ) -> Optional[Coordinates]:
        if not location_text:
            return None
        start = time.perf_counter()
        origin = await self.geocoder.resolve(location_text)
        record_stage_latency(operation, "geocode", (time.perf_counter() - start) * 1000)
        if origin is None:
            logger.info("Could not geocode %r; continuing without an origin", location_text)
        return origin

    async def search(self, query: SearchQuery) -> SearchOutcome:
        """
        Run a procedure-price search.

        Args:
            query: Validated search request

        Returns:
            SearchOutcome with the requested page and statistics over the
            whole filtered set (None when nothing matched)

        Raises:
            RepositoryException: the price store could not be read
        """
        start_total = time.perf_counter()

        origin = await self._resolve_origin(query.location_text, "search")
        geocode_failed = query.location_text is not None and origin is None

        match_start = time.perf_counter()
        template_ids = await asyncio.to_thread(
            self.catalog_matcher.match_templates, query.procedure_text, query.category_id
        )
        record_stage_latency("search", "match", (time.perf_counter() - match_start) * 1000)

        if not template_ids:
            logger.info("No templates matched %r; skipping retrieval", query.procedure_text)
            record_result_count("search", 0, origin is not None)
            empty = SearchResultPage(
                items=[], total=0, pages=0, page=query.page, page_size=query.page_size, query=query
            )
            return SearchOutcome(
                page=empty, statistics=None, origin=origin, geocode_failed=geocode_failed
            )

        retrieve_start = time.perf_counter()
        candidates = await asyncio.to_thread(self.retriever.fetch_candidates, template_ids)
        record_stage_latency("search", "retrieve", (time.perf_counter() - retrieve_start) * 1000)

        filtered: List[SearchCandidate] = list(candidates)
        if origin is not None:
            filtered = apply_distance_filter(filtered, origin, query.radius_miles)
        filtered = apply_price_filter(filtered, query.price_min, query.price_max)

        statistics = summarize(filtered)

        ordered = sort_candidates(
            filtered, query.sort_key, query.sort_direction, has_origin=origin is not None
        )
        items, total, pages = paginate(ordered, query.page, query.page_size)

        record_result_count("search", total, origin is not None)
        record_stage_latency("search", "total", (time.perf_counter() - start_total) * 1000)
        logger.info(
            "Search query=%r location=%r: %d candidates, %d after filters, page %d/%d",
            query.procedure_text,
            query.location_text,
            len(candidates),
            total,
            query.page,
            pages,
        )

        return SearchOutcome(
            page=SearchResultPage(
                items=items,
                total=total,
                pages=pages,
                page=query.page,
                page_size=query.page_size,
                query=query,
            ),
            statistics=statistics,
            origin=origin,
            geocode_failed=geocode_failed,
        )

    async def price_stats(
        self,
        template_id: str,
        location_text: Optional[str] = None,
        radius: Optional[float] = None,
        location_id: Optional[str] = None,
    ) -> StatsOutcome:
        """
        Price statistics for one template, optionally around a location.

        Args:
            template_id: Template to summarize
            location_text: Optional place to center a radius filter on
            radius: Radius in miles (defaults to the configured radius)
            location_id: Restrict to prices at a single location

        Raises:
            ValidationException: radius is not positive
            NotFoundException: template does not exist
        """
        radius_miles = validate_radius(radius, self.config.default_radius_miles)
        location_text = (location_text or "").strip() or None

        template = await asyncio.to_thread(self.catalog_repository.get_template, template_id)
        if template is None:
            raise NotFoundException(
                "Procedure template not found",
                code="TEMPLATE_NOT_FOUND",
                details={"template_id": template_id},
            )

        origin = await self._resolve_origin(location_text, "stats")
        candidates = await asyncio.to_thread(
            self.retriever.fetch_candidates, [template_id], location_id
        )

        providers_in_range: Optional[int] = None
        if origin is not None:
            candidates = apply_distance_filter(candidates, origin, radius_miles)
            providers_in_range = len(candidates)

        statistics = summarize(candidates)
        record_result_count("stats", len(candidates), origin is not None)

        category = template.category
        return StatsOutcome(
            template=TemplateSummary(
                id=template.id,
                name=template.name,
                description=template.description,
                category_id=template.category_id,
                category_name=category.name if category is not None else None,
            ),
            statistics=statistics,
            radius_miles=radius_miles,
            origin=origin,
            location_text=location_text,
            providers_in_range=providers_in_range,
            geocode_failed=location_text is not None and origin is None,
        )
