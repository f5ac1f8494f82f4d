# backend/carecompare/services/search/metrics.py
"""
Prometheus metrics for procedure-price search.

Provides observability for:
- Search latency by stage
- Result counts and zero-result searches
- Geocoding outcomes (upstream hit, fallback table, not found)
"""
from __future__ import annotations

from prometheus_client import Counter, Histogram

from carecompare.monitoring.prometheus_metrics import REGISTRY

SEARCH_LATENCY = Histogram(
    "carecompare_search_latency_ms",
    "Search latency in milliseconds",
    ["operation", "stage"],
    registry=REGISTRY,
    buckets=[5, 10, 25, 50, 100, 200, 500, 1000, 3000],
)

SEARCH_RESULT_COUNT = Histogram(
    "carecompare_search_result_count",
    "Number of candidates left after filtering",
    ["operation"],
    registry=REGISTRY,
    buckets=[0, 1, 5, 10, 20, 50, 100, 500],
)

SEARCH_ZERO_RESULTS = Counter(
    "carecompare_search_zero_results_total",
    "Count of searches whose filtered candidate set was empty",
    ["operation", "has_location"],
    registry=REGISTRY,
)

GEOCODE_OUTCOMES = Counter(
    "carecompare_geocode_outcome_total",
    "Geocoding attempts by outcome",
    ["provider", "outcome"],
    registry=REGISTRY,
)


def record_stage_latency(operation: str, stage: str, latency_ms: float) -> None:
    SEARCH_LATENCY.labels(operation=operation, stage=stage).observe(latency_ms)


def record_result_count(operation: str, count: int, has_location: bool) -> None:
    SEARCH_RESULT_COUNT.labels(operation=operation).observe(count)
    if count == 0:
        SEARCH_ZERO_RESULTS.labels(
            operation=operation, has_location=str(has_location).lower()
        ).inc()


def record_geocode_outcome(provider: str, outcome: str) -> None:
    GEOCODE_OUTCOMES.labels(provider=provider, outcome=outcome).inc()
