"""Health check response schema."""

from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, Field

from ..core.constants import API_TITLE, API_VERSION


class HealthCheckResponse(BaseModel):
    """Standard health check response."""

    status: str = Field(description="Service health status", pattern="^(healthy|degraded)$")
    service: str = Field(default=API_TITLE, description="Service name")
    version: str = Field(default=API_VERSION, description="API version")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Check timestamp"
    )
    checks: Dict[str, bool] = Field(description="Individual component health checks")
