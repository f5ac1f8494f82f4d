"""
Response models for procedure-price search endpoints.

Prices and statistics keep full precision inside the services; every
rounding to cents happens here, when the response is built.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.constants import GEOCODE_ERROR_MESSAGE
from ..services.geocoding.base import Coordinates
from ..services.search.provider_search import ProviderHit, ProviderSearchOutcome
from ..services.search.ranker import SearchOutcome, StatsOutcome
from ..services.search.retriever import SearchCandidate
from ..services.search.statistics import PriceStatistics, savings_vs_average


def _cents(value: Optional[float]) -> Optional[float]:
    return round(value, 2) if value is not None else None


class ProcedureInfo(BaseModel):
    """Procedure template and category of a price."""

    id: str = Field(description="Procedure template ID")
    name: str = Field(description="Procedure name")
    description: Optional[str] = Field(default=None, description="Procedure description")
    category_id: Optional[str] = Field(default=None, description="Category ID")
    category_name: Optional[str] = Field(default=None, description="Category name")


class ProviderInfo(BaseModel):
    id: str = Field(description="Provider ID")
    name: str = Field(description="Organization name")
    logo_url: Optional[str] = Field(default=None, description="Provider logo URL")


class LocationInfo(BaseModel):
    id: str = Field(description="Location ID")
    name: Optional[str] = Field(default=None, description="Location name")
    address: str = Field(description="Single-line street address")
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class PriceResult(BaseModel):
    """One price in the search results."""

    id: str = Field(description="Price record ID")
    price: float = Field(description="Published price in USD")
    comments: Optional[str] = Field(default=None, description="Provider comments")
    procedure: ProcedureInfo
    provider: ProviderInfo
    location: LocationInfo
    distance: Optional[float] = Field(
        default=None, description="Miles from the search location, when one resolved"
    )
    savings_vs_average: Optional[float] = Field(
        default=None, description="Average price minus this price"
    )
    savings_percent: Optional[float] = Field(
        default=None, description="Savings as a percentage of the average price"
    )

    @classmethod
    def from_candidate(
        cls, candidate: SearchCandidate, statistics: Optional[PriceStatistics]
    ) -> "PriceResult":
        savings, percent = savings_vs_average(candidate.price, statistics)
        return cls(
            id=candidate.id,
            price=round(candidate.price, 2),
            comments=candidate.comments,
            procedure=ProcedureInfo(
                id=candidate.template_id,
                name=candidate.template_name,
                description=candidate.template_description,
                category_id=candidate.category_id,
                category_name=candidate.category_name,
            ),
            provider=ProviderInfo(
                id=candidate.provider_id,
                name=candidate.provider_name,
                logo_url=candidate.provider_logo_url,
            ),
            location=LocationInfo(
                id=candidate.location_id,
                name=candidate.location_name,
                address=candidate.address,
                city=candidate.city,
                state=candidate.state,
                zip_code=candidate.zip_code,
                latitude=candidate.latitude,
                longitude=candidate.longitude,
            ),
            distance=_cents(candidate.distance),
            savings_vs_average=savings,
            savings_percent=percent,
        )


class Pagination(BaseModel):
    page: int = Field(description="Current page number", ge=1)
    limit: int = Field(description="Items per page", ge=1)
    total: int = Field(description="Total matching items across all pages", ge=0)
    pages: int = Field(description="Total number of pages", ge=0)


class PriceStatsResponse(BaseModel):
    """Price statistics, rounded to cents."""

    count: int = Field(description="Number of prices summarized")
    min: float
    max: float
    average: float
    median: float

    @classmethod
    def from_statistics(
        cls, statistics: Optional[PriceStatistics]
    ) -> Optional["PriceStatsResponse"]:
        if statistics is None:
            return None
        return cls(
            count=statistics.count,
            min=round(statistics.min, 2),
            max=round(statistics.max, 2),
            average=round(statistics.mean, 2),
            median=round(statistics.median, 2),
        )


class SearchLocation(BaseModel):
    latitude: float
    longitude: float
    address: str = Field(description="Location text as supplied")

    @classmethod
    def build(
        cls, origin: Optional[Coordinates], address: Optional[str]
    ) -> Optional["SearchLocation"]:
        if origin is None:
            return None
        return cls(latitude=origin.latitude, longitude=origin.longitude, address=address or "")


class PriceSearchResponse(BaseModel):
    """Procedure-price search results."""

    results: List[PriceResult]
    pagination: Pagination
    stats: Optional[PriceStatsResponse] = Field(
        default=None, description="Statistics over all filtered results; null when none"
    )
    search_location: Optional[SearchLocation] = None
    geocode_error: Optional[str] = Field(
        default=None, description="Set when a location was given but could not be resolved"
    )
    procedure_name: Optional[str] = Field(
        default=None, description="Name of the first result's procedure for text searches"
    )
    query: Dict[str, Any] = Field(
        default_factory=dict, description="Effective search parameters after defaults and clamping"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "results": ["..."],
                "pagination": {"page": 1, "limit": 20, "total": 3, "pages": 1},
                "stats": {"count": 3, "min": 450.0, "max": 1200.0, "average": 800.0, "median": 750.0},
                "search_location": {"latitude": 34.0736, "longitude": -118.4004, "address": "90210"},
                "geocode_error": None,
                "procedure_name": "MRI Brain",
                "query": {"query": "MRI", "location": "90210", "radius": 25.0, "sort": "price_asc"},
            }
        }
    )

    @classmethod
    def from_outcome(cls, outcome: SearchOutcome) -> "PriceSearchResponse":
        page = outcome.page
        query = page.query
        results = [PriceResult.from_candidate(c, outcome.statistics) for c in page.items]
        procedure_name = None
        if query.procedure_text and page.items:
            procedure_name = page.items[0].template_name
        return cls(
            results=results,
            pagination=Pagination(
                page=page.page, limit=page.page_size, total=page.total, pages=page.pages
            ),
            stats=PriceStatsResponse.from_statistics(outcome.statistics),
            search_location=SearchLocation.build(outcome.origin, query.location_text),
            geocode_error=GEOCODE_ERROR_MESSAGE if outcome.geocode_failed else None,
            procedure_name=procedure_name,
            query=query.to_dict(),
        )


class TemplateInfo(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None


class StatsLocationInfo(BaseModel):
    search_location: SearchLocation
    search_radius: float = Field(description="Radius in miles")
    providers_in_range: int = Field(description="Price records within the search radius")


class ProcedureStatsResponse(BaseModel):
    """Price statistics for one procedure template."""

    template: TemplateInfo
    stats: Optional[PriceStatsResponse] = None
    location_info: Optional[StatsLocationInfo] = None
    geocode_error: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: StatsOutcome) -> "ProcedureStatsResponse":
        location_info = None
        search_location = SearchLocation.build(outcome.origin, outcome.location_text)
        if search_location is not None:
            location_info = StatsLocationInfo(
                search_location=search_location,
                search_radius=outcome.radius_miles,
                providers_in_range=outcome.providers_in_range or 0,
            )
        template = outcome.template
        return cls(
            template=TemplateInfo(
                id=template.id,
                name=template.name,
                description=template.description,
                category_id=template.category_id,
                category_name=template.category_name,
            ),
            stats=PriceStatsResponse.from_statistics(outcome.statistics),
            location_info=location_info,
            geocode_error=GEOCODE_ERROR_MESSAGE if outcome.geocode_failed else None,
        )


class ProviderLocationResult(BaseModel):
    id: str
    name: Optional[str] = None
    address1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance: Optional[float] = None


class ProviderResult(BaseModel):
    id: str
    name: str
    bio: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    locations: List[ProviderLocationResult]
    closest_distance: Optional[float] = Field(
        default=None, description="Miles to the provider's closest location"
    )

    @classmethod
    def from_hit(cls, hit: ProviderHit) -> "ProviderResult":
        return cls(
            id=hit.id,
            name=hit.name,
            bio=hit.bio,
            logo_url=hit.logo_url,
            website=hit.website,
            locations=[
                ProviderLocationResult(
                    id=loc.id,
                    name=loc.name,
                    address1=loc.address1,
                    city=loc.city,
                    state=loc.state,
                    zip_code=loc.zip_code,
                    latitude=loc.latitude,
                    longitude=loc.longitude,
                    distance=_cents(loc.distance),
                )
                for loc in hit.locations
            ],
            closest_distance=_cents(hit.closest_distance),
        )


class ProviderSearchResponse(BaseModel):
    results: List[ProviderResult]
    pagination: Pagination
    search_location: Optional[SearchLocation] = None
    geocode_error: Optional[str] = None

    @classmethod
    def from_outcome(
        cls, outcome: ProviderSearchOutcome, location_text: Optional[str]
    ) -> "ProviderSearchResponse":
        return cls(
            results=[ProviderResult.from_hit(hit) for hit in outcome.items],
            pagination=Pagination(
                page=outcome.page,
                limit=outcome.page_size,
                total=outcome.total,
                pages=outcome.pages,
            ),
            search_location=SearchLocation.build(outcome.origin, location_text),
            geocode_error=GEOCODE_ERROR_MESSAGE if outcome.geocode_failed else None,
        )
