"""Mapbox geocoding provider."""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from .base import GeocodedAddress, GeocodingProvider

logger = logging.getLogger(__name__)


class MapboxProvider(GeocodingProvider):
    name = "mapbox"

    def __init__(
        self,
        access_token: str,
        timeout: float = 3.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.access_token = access_token
        self.timeout = timeout
        self.base_url = "https://api.mapbox.com"
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.access_token)

    async def geocode(self, address: str) -> Optional[GeocodedAddress]:
        if not self.access_token:
            logger.warning("MAPBOX_ACCESS_TOKEN is not configured; skipping upstream geocode")
            return None

        encoded = quote(address, safe="")
        url = f"{self.base_url}/geocoding/v5/mapbox.places/{encoded}.json"
        params = {
            "access_token": self.access_token,
            "types": "address,poi,place,postcode",
            "limit": "1",
        }
        if self._client is not None:
            resp = await self._client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url, params=params)

        if resp.status_code != 200:
            logger.warning("Mapbox geocoding returned HTTP %s", resp.status_code)
            return None
        data = resp.json()
        if not isinstance(data, dict):
            logger.warning("Mapbox geocoding returned a non-object body")
            return None
        features = data.get("features") or []
        if not features:
            return None
        return self._parse_feature(features[0])

    def _parse_feature(self, feature: dict[str, Any]) -> GeocodedAddress:
        # center is [lng, lat]
        lng, lat = feature["center"][:2]
        context: dict[str, str] = {}
        for item in feature.get("context") or []:
            kind = str(item.get("id", "")).split(".", 1)[0]
            if kind and item.get("text"):
                context[kind] = item["text"]
        return GeocodedAddress(
            latitude=lat,
            longitude=lng,
            formatted_address=feature.get("place_name", ""),
            city=context.get("place"),
            state=context.get("region"),
            postal_code=context.get("postcode"),
            country=context.get("country"),
            provider_id=f"mapbox:{feature.get('id', '')}",
            provider_data=feature,
            confidence_score=float(feature.get("relevance", 1.0)),
        )
