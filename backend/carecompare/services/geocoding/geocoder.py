"""
Location resolution for search origins.

Wraps a GeocodingProvider with the rules the search path needs:
- bare ZIP / ZIP+4 input gets a country hint before the upstream call
- one upstream attempt per request, bounded by a hard timeout
- provider failures never raise; ZIP input falls back to a static table
"""

import asyncio
import logging
import re
from typing import Dict, Mapping, Optional, Tuple

import httpx

from ...core.constants import POSTAL_CODE_COUNTRY_HINT, POSTAL_CODE_PATTERN
from ..search.metrics import record_geocode_outcome
from .base import Coordinates, GeocodedAddress, GeocodingProvider

logger = logging.getLogger(__name__)

_POSTAL_CODE_RE = re.compile(POSTAL_CODE_PATTERN)


def is_postal_code(text: str) -> bool:
    return _POSTAL_CODE_RE.match(text.strip()) is not None


class Geocoder:
    """
    Resolve free-form location text to coordinates.

    Usage:
        geocoder = Geocoder(GoogleMapsProvider(api_key), fallback_postal_codes=table)
        origin = await geocoder.resolve("90210")
    """

    def __init__(
        self,
        provider: GeocodingProvider,
        fallback_postal_codes: Optional[Mapping[str, Tuple[float, float]]] = None,
        timeout_seconds: float = 3.0,
    ) -> None:
        self.provider = provider
        self.fallback_postal_codes: Dict[str, Tuple[float, float]] = dict(
            fallback_postal_codes or {}
        )
        self.timeout_seconds = timeout_seconds

    @property
    def provider_name(self) -> str:
        return getattr(self.provider, "name", type(self.provider).__name__)

    async def _call_provider(self, query: str) -> Tuple[Optional[GeocodedAddress], bool]:
        """(result, failed); failed is True on a timeout or provider error."""
        logger.debug("Attempting to geocode: %r", query)
        try:
            result = await asyncio.wait_for(
                self.provider.geocode(query), timeout=self.timeout_seconds
            )
            return result, False
        except asyncio.TimeoutError:
            logger.warning(
                "Geocoding %r timed out after %.1fs", query, self.timeout_seconds
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Geocoding %r failed: %s: %s", query, type(exc).__name__, exc)
        return None, True

    async def resolve(self, location_text: str) -> Optional[Coordinates]:
        """
        Resolve location text, returning None when it cannot be located.

        Exactly one outcome is recorded per call: upstream, fallback, or the
        reason nothing resolved (error, skipped, not_found).

        Args:
            location_text: City/state, ZIP code, or street address

        Returns:
            Coordinates of the first upstream result, the fallback-table entry
            for a ZIP code, or None
        """
        text = (location_text or "").strip()
        if not text:
            return None

        postal = is_postal_code(text)
        query = f"{text}, {POSTAL_CODE_COUNTRY_HINT}" if postal else text

        result: Optional[GeocodedAddress] = None
        miss_outcome = "not_found"
        if self.provider.is_configured:
            result, failed = await self._call_provider(query)
            if failed:
                miss_outcome = "error"
        else:
            logger.warning(
                "Geocoding provider %s has no credentials; using fallback table only",
                self.provider_name,
            )
            miss_outcome = "skipped"

        if result is not None:
            record_geocode_outcome(self.provider_name, "upstream")
            return result.coordinates

        if postal:
            zip_code = text[:5]
            coords = self.fallback_postal_codes.get(zip_code)
            if coords is not None:
                logger.info("Using default coordinates for ZIP code %s", zip_code)
                record_geocode_outcome(self.provider_name, "fallback")
                return Coordinates(coords[0], coords[1])

        record_geocode_outcome(self.provider_name, miss_outcome)
        return None
