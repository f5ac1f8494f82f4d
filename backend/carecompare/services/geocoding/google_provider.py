"""Google Maps geocoding provider."""

import logging
from typing import Any, Optional

import httpx

from .base import GeocodedAddress, GeocodingProvider

logger = logging.getLogger(__name__)


class GoogleMapsProvider(GeocodingProvider):
    name = "google"

    def __init__(
        self,
        api_key: str,
        timeout: float = 3.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = "https://maps.googleapis.com/maps/api"
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def geocode(self, address: str) -> Optional[GeocodedAddress]:
        if not self.api_key:
            logger.warning("GOOGLE_MAPS_API_KEY is not configured; skipping upstream geocode")
            return None

        params = {"address": address, "key": self.api_key}
        if self._client is not None:
            resp = await self._client.get(f"{self.base_url}/geocode/json", params=params)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(f"{self.base_url}/geocode/json", params=params)

        if resp.status_code != 200:
            logger.warning("Google geocoding returned HTTP %s", resp.status_code)
            return None
        data = resp.json()
        if not isinstance(data, dict):
            logger.warning("Google geocoding returned a non-object body")
            return None
        status = data.get("status")
        if status != "OK" or not data.get("results"):
            logger.warning("Google geocoding failed: %s", status or "No results")
            return None
        return self._parse_result(data["results"][0])

    def _parse_result(self, result: dict[str, Any]) -> GeocodedAddress:
        comps: dict[str, str] = {}
        short_comps: dict[str, str] = {}
        for c in result.get("address_components") or []:
            long_name = c.get("long_name")
            short_name = c.get("short_name")
            for t in c.get("types", []):
                if isinstance(long_name, str) and long_name:
                    comps[t] = long_name
                if isinstance(short_name, str) and short_name:
                    short_comps[t] = short_name
        loc = result.get("geometry", {}).get("location", {})
        return GeocodedAddress(
            latitude=loc["lat"],
            longitude=loc["lng"],
            formatted_address=result.get("formatted_address", ""),
            city=comps.get("locality") or comps.get("postal_town") or comps.get("sublocality"),
            state=short_comps.get("administrative_area_level_1")
            or comps.get("administrative_area_level_1"),
            postal_code=comps.get("postal_code"),
            country=short_comps.get("country") or comps.get("country"),
            provider_id=f"google:{result.get('place_id', '')}",
            provider_data=result,
        )
