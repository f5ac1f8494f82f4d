"""Read-only repositories over the catalog and price store."""

from .catalog_repository import CatalogRepository
from .price_repository import PriceRepository
from .provider_repository import ProviderRepository

__all__ = ["CatalogRepository", "PriceRepository", "ProviderRepository"]
