# backend/carecompare/services/search/config.py
"""
Configuration for procedure-price search.

Settings are loaded from environment variables once, at first access, and
are then passed explicitly into the search components.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import os
from threading import Lock
from typing import Any, Dict, Optional, Tuple

from carecompare.core.constants import (
    DEFAULT_FALLBACK_POSTAL_CODES,
    DEFAULT_PAGE_SIZE,
    DEFAULT_RADIUS_MILES,
    MAX_PAGE_SIZE,
)

logger = logging.getLogger(__name__)


def _parse_fallback_table(raw: Optional[str]) -> Dict[str, Tuple[float, float]]:
    """Parse ``{"90210": [34.07, -118.40], ...}``; invalid input keeps the defaults."""
    if not raw:
        return dict(DEFAULT_FALLBACK_POSTAL_CODES)
    try:
        parsed = json.loads(raw)
        return {
            str(zip_code)[:5]: (float(coords[0]), float(coords[1]))
            for zip_code, coords in parsed.items()
        }
    except (ValueError, TypeError, KeyError, IndexError, AttributeError):
        logger.warning("Invalid GEOCODE_FALLBACK_POSTAL_CODES; using built-in table")
        return dict(DEFAULT_FALLBACK_POSTAL_CODES)


@dataclass
class SearchConfig:
    """Configuration for procedure-price search."""

    default_radius_miles: float = DEFAULT_RADIUS_MILES
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE

    # 5-digit ZIP -> (latitude, longitude)
    fallback_postal_codes: Dict[str, Tuple[float, float]] = field(
        default_factory=lambda: dict(DEFAULT_FALLBACK_POSTAL_CODES)
    )

    @classmethod
    def from_env(cls) -> "SearchConfig":
        """Load configuration from environment variables."""
        return cls(
            default_radius_miles=float(
                os.getenv("SEARCH_DEFAULT_RADIUS_MILES", str(DEFAULT_RADIUS_MILES))
            ),
            default_page_size=int(os.getenv("SEARCH_DEFAULT_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))),
            max_page_size=int(os.getenv("SEARCH_MAX_PAGE_SIZE", str(MAX_PAGE_SIZE))),
            fallback_postal_codes=_parse_fallback_table(
                os.getenv("GEOCODE_FALLBACK_POSTAL_CODES")
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default_radius_miles": self.default_radius_miles,
            "default_page_size": self.default_page_size,
            "max_page_size": self.max_page_size,
            "fallback_postal_codes": sorted(self.fallback_postal_codes),
        }


# Thread-safe singleton pattern for config
_config: Optional[SearchConfig] = None
_config_lock = Lock()


def get_search_config() -> SearchConfig:
    """
    Get the search configuration singleton.

    Loads from environment on first access.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = SearchConfig.from_env()
    return _config


def reset_search_config() -> None:
    """Drop the cached configuration so the next access reloads it."""
    global _config
    with _config_lock:
        _config = None
