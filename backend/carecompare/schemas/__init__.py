"""Pydantic response models."""

from .health import HealthCheckResponse
from .search import (
    PriceResult,
    PriceSearchResponse,
    PriceStatsResponse,
    ProcedureStatsResponse,
    ProviderResult,
    ProviderSearchResponse,
)

__all__ = [
    "HealthCheckResponse",
    "PriceResult",
    "PriceSearchResponse",
    "PriceStatsResponse",
    "ProcedureStatsResponse",
    "ProviderResult",
    "ProviderSearchResponse",
]
