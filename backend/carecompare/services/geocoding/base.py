"""Provider-agnostic geocoding interfaces."""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel


class Coordinates(NamedTuple):
    latitude: float
    longitude: float


class GeocodedAddress(BaseModel):
    latitude: float
    longitude: float
    formatted_address: str
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    provider_id: str
    provider_data: dict[str, Any] = {}
    confidence_score: float = 1.0

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)


class GeocodingProvider(ABC):
    """Upstream address lookup. Returns None when the provider has no answer."""

    name: str = "base"

    @property
    def is_configured(self) -> bool:
        """False when required credentials are missing."""
        return True

    @abstractmethod
    async def geocode(self, address: str) -> Optional[GeocodedAddress]:
        pass
