"""Mock geocoding provider for unit tests (no network calls)."""

from typing import Dict, Optional, Tuple

from .base import GeocodedAddress, GeocodingProvider


class MockGeocodingProvider(GeocodingProvider):
    """
    Resolves addresses from an in-memory table.

    Lookups are case-insensitive on the stripped address. Unknown addresses
    resolve to ``default`` when one is given, otherwise to None.
    """

    name = "mock"

    def __init__(
        self,
        locations: Optional[Dict[str, Tuple[float, float]]] = None,
        default: Optional[Tuple[float, float]] = None,
    ) -> None:
        self.locations = {k.strip().lower(): v for k, v in (locations or {}).items()}
        self.default = default
        self.calls: list[str] = []

    async def geocode(self, address: str) -> Optional[GeocodedAddress]:
        self.calls.append(address)
        coords = self.locations.get(address.strip().lower(), self.default)
        if coords is None:
            return None
        return GeocodedAddress(
            latitude=coords[0],
            longitude=coords[1],
            formatted_address=address,
            provider_id="mock:geocode",
            provider_data={"source": "mock"},
        )
