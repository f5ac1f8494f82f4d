# backend/carecompare/routes/v1/search.py
"""
Search routes - API v1

Versioned search endpoints under /api/v1/search.

Endpoints:
    GET /procedures               → Procedure-price search with stats and pagination
    GET /stats/{template_id}      → Price statistics for one procedure template
    GET /providers                → Provider directory search
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.services import (
    get_price_search_service,
    get_provider_search_service,
)
from ...schemas.search import (
    PriceSearchResponse,
    ProcedureStatsResponse,
    ProviderSearchResponse,
)
from ...services.search.provider_search import ProviderSearchService
from ...services.search.query import SearchQuery
from ...services.search.ranker import PriceSearchService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["search-v1"])


@router.get("/procedures", response_model=PriceSearchResponse)
async def search_procedures(
    query: Optional[str] = Query(None, max_length=200, description="Procedure text"),
    location: Optional[str] = Query(
        None, max_length=200, description="City/state, ZIP code, or address"
    ),
    category_id: Optional[str] = Query(None, description="Procedure category ID"),
    radius: Optional[float] = Query(None, description="Search radius in miles"),
    price_min: Optional[float] = Query(None, description="Minimum price (inclusive)"),
    price_max: Optional[float] = Query(None, description="Maximum price (inclusive)"),
    sort: Optional[str] = Query(
        None, description="price|distance|name, or a combined form such as price_asc"
    ),
    direction: Optional[str] = Query(None, description="asc|desc"),
    page: Optional[int] = Query(None, description="Page number (clamped to >= 1)"),
    page_size: Optional[int] = Query(None, description="Items per page (clamped)"),
    service: PriceSearchService = Depends(get_price_search_service),
) -> PriceSearchResponse:
    """
    Search procedure prices near a location.

    Statistics cover every price that passed the filters, not just the
    returned page. An unresolvable location is not an error: the search
    runs without a distance filter and ``geocode_error`` is set.
    """
    search_query = SearchQuery.build(
        procedure_text=query,
        location_text=location,
        category_id=category_id,
        radius=radius,
        price_min=price_min,
        price_max=price_max,
        sort=sort,
        direction=direction,
        page=page,
        page_size=page_size,
        config=service.config,
    )
    outcome = await service.search(search_query)
    return PriceSearchResponse.from_outcome(outcome)


@router.get("/stats/{template_id}", response_model=ProcedureStatsResponse)
async def procedure_stats(
    template_id: str,
    location: Optional[str] = Query(None, max_length=200, description="Center of the area"),
    radius: Optional[float] = Query(None, description="Radius in miles"),
    location_id: Optional[str] = Query(None, description="Restrict to a single location"),
    service: PriceSearchService = Depends(get_price_search_service),
) -> ProcedureStatsResponse:
    """Price statistics (count, min, max, average, median) for a procedure."""
    outcome = await service.price_stats(
        template_id, location_text=location, radius=radius, location_id=location_id
    )
    return ProcedureStatsResponse.from_outcome(outcome)


@router.get("/providers", response_model=ProviderSearchResponse)
async def search_providers(
    query: Optional[str] = Query(None, max_length=200, description="Provider name or bio text"),
    location: Optional[str] = Query(None, max_length=200),
    radius: Optional[float] = Query(None, description="Search radius in miles"),
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None),
    service: ProviderSearchService = Depends(get_provider_search_service),
) -> ProviderSearchResponse:
    """Providers ordered by closest location (or by name without a location)."""
    outcome = await service.search_providers(
        text=query, location=location, radius=radius, page=page, page_size=page_size
    )
    return ProviderSearchResponse.from_outcome(outcome, (location or "").strip() or None)
