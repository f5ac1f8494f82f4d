"""
Prometheus metrics endpoint for monitoring infrastructure.

This is a PUBLIC endpoint (no authentication required) following
standard Prometheus practices.
"""

from fastapi import APIRouter, Response
from prometheus_client import Counter

from ..monitoring.prometheus_metrics import REGISTRY, get_content_type, get_metrics

router = APIRouter(tags=["monitoring"])

_scrape_counter = Counter(
    "carecompare_prometheus_scrapes_total",
    "Total number of Prometheus metrics scrapes",
    registry=REGISTRY,
)


@router.get("/metrics", include_in_schema=False)
def prometheus_metrics_endpoint() -> Response:
    _scrape_counter.inc()
    return Response(
        content=get_metrics(),
        media_type=get_content_type(),
        headers={"Cache-Control": "no-store"},
    )
