# backend/carecompare/services/search/query.py
"""
Search request value objects and their validation.

Invalid input is rejected here, before any geocoding or retrieval happens.
Page and page size are clamped rather than rejected.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Any, Dict, Optional, Tuple

from carecompare.core.exceptions import ValidationException
from carecompare.services.search.config import SearchConfig, get_search_config


class SortKey(str, Enum):
    PRICE = "price"
    DISTANCE = "distance"
    NAME = "name"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def parse_sort(
    sort: Optional[str], direction: Optional[str] = None
) -> Tuple[SortKey, SortDirection]:
    """
    Parse a sort key and direction.

    Accepts ``price``/``distance``/``name`` with a separate direction, or
    the combined forms ``price_asc``, ``distance_desc`` and so on. An
    explicit direction wins over a combined suffix.
    """
    raw_key = (_clean(sort) or SortKey.PRICE.value).lower()
    raw_direction = _clean(direction)

    key_part, _, suffix = raw_key.partition("_")
    if suffix and raw_direction is None:
        raw_direction = suffix
    elif suffix and suffix not in {d.value for d in SortDirection}:
        key_part = raw_key

    try:
        key = SortKey(key_part)
    except ValueError:
        raise ValidationException(
            f"Unsupported sort key '{sort}'",
            code="INVALID_SORT",
            details={"allowed": [k.value for k in SortKey]},
        )
    try:
        sort_direction = SortDirection((raw_direction or SortDirection.ASC.value).lower())
    except ValueError:
        raise ValidationException(
            f"Unsupported sort direction '{raw_direction}'",
            code="INVALID_SORT_DIRECTION",
            details={"allowed": [d.value for d in SortDirection]},
        )
    return key, sort_direction


def validate_radius(radius: Optional[float], default: float) -> float:
    if radius is None:
        return default
    if not math.isfinite(radius) or radius <= 0:
        raise ValidationException(
            "Search radius must be a positive number of miles",
            code="INVALID_RADIUS",
            details={"radius": radius},
        )
    return float(radius)


def clamp_page(
    page: Optional[int], page_size: Optional[int], config: SearchConfig
) -> Tuple[int, int]:
    page_value = max(1, page or 1)
    size_value = page_size if page_size is not None else config.default_page_size
    size_value = min(max(1, size_value), config.max_page_size)
    return page_value, size_value


@dataclass(frozen=True)
class SearchQuery:
    """A validated procedure-price search request."""

    procedure_text: Optional[str] = None
    location_text: Optional[str] = None
    category_id: Optional[str] = None
    radius_miles: float = 50.0
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    sort_key: SortKey = SortKey.PRICE
    sort_direction: SortDirection = SortDirection.ASC
    page: int = 1
    page_size: int = 20

    @classmethod
    def build(
        cls,
        *,
        procedure_text: Optional[str] = None,
        location_text: Optional[str] = None,
        category_id: Optional[str] = None,
        radius: Optional[float] = None,
        price_min: Optional[float] = None,
        price_max: Optional[float] = None,
        sort: Optional[str] = None,
        direction: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        config: Optional[SearchConfig] = None,
    ) -> "SearchQuery":
        """
        Validate raw request parameters.

        Raises:
            ValidationException: bad radius, bad price bounds, or unknown sort
        """
        config = config or get_search_config()
        radius_miles = validate_radius(radius, config.default_radius_miles)

        for label, bound in (("price_min", price_min), ("price_max", price_max)):
            if bound is not None and (not math.isfinite(bound) or bound < 0):
                raise ValidationException(
                    f"{label} must be a non-negative amount",
                    code="INVALID_PRICE_RANGE",
                    details={label: bound},
                )
        if price_min is not None and price_max is not None and price_min > price_max:
            raise ValidationException(
                "price_min cannot be greater than price_max",
                code="INVALID_PRICE_RANGE",
                details={"price_min": price_min, "price_max": price_max},
            )

        sort_key, sort_direction = parse_sort(sort, direction)
        page_value, size_value = clamp_page(page, page_size, config)

        return cls(
            procedure_text=_clean(procedure_text),
            location_text=_clean(location_text),
            category_id=_clean(category_id),
            radius_miles=radius_miles,
            price_min=price_min,
            price_max=price_max,
            sort_key=sort_key,
            sort_direction=sort_direction,
            page=page_value,
            page_size=size_value,
        )

    @property
    def sort(self) -> str:
        return f"{self.sort_key.value}_{self.sort_direction.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.procedure_text,
            "location": self.location_text,
            "category_id": self.category_id,
            "radius": self.radius_miles,
            "price_min": self.price_min,
            "price_max": self.price_max,
            "sort": self.sort,
            "page": self.page,
            "page_size": self.page_size,
        }
