"""
Prometheus registry and exposition helpers.

All service metrics register against REGISTRY instead of the process-wide
default so tests and multiple app instances do not collide.
"""

from typing import cast

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()


def get_metrics() -> bytes:
    """Metrics data in Prometheus text format."""
    return cast(bytes, generate_latest(REGISTRY))


def get_content_type() -> str:
    return cast(str, CONTENT_TYPE_LATEST)
