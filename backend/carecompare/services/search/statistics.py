# backend/carecompare/services/search/statistics.py
"""
Price statistics over a filtered candidate set.

Values are exact (no sampling). Mean keeps full precision here; rounding
to cents happens only when a response is rendered.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable, Optional, Sequence, Tuple

from carecompare.services.search.retriever import SearchCandidate


@dataclass(frozen=True)
class PriceStatistics:
    count: int
    min: float
    max: float
    mean: float
    median: float


def median(sorted_prices: Sequence[float]) -> float:
    """Median of an ascending, non-empty sequence."""
    n = len(sorted_prices)
    mid = n // 2
    if n % 2:
        return sorted_prices[mid]
    return (sorted_prices[mid - 1] + sorted_prices[mid]) / 2


def summarize_prices(prices: Iterable[float]) -> Optional[PriceStatistics]:
    """Statistics for a price list, or None when the list is empty."""
    ordered = sorted(float(p) for p in prices)
    if not ordered:
        return None
    mean = math.fsum(ordered) / len(ordered)
    # fsum is exact, but guard against the last-ulp drift of the division
    mean = min(max(mean, ordered[0]), ordered[-1])
    return PriceStatistics(
        count=len(ordered),
        min=ordered[0],
        max=ordered[-1],
        mean=mean,
        median=median(ordered),
    )


def summarize(candidates: Iterable[SearchCandidate]) -> Optional[PriceStatistics]:
    """
    Summarize the prices of a filtered (not paginated) candidate set.

    Returns:
        PriceStatistics, or None for an empty set so callers never render
        a "$0.00 average"
    """
    return summarize_prices(c.price for c in candidates)


def savings_vs_average(
    price: float, statistics: Optional[PriceStatistics]
) -> Tuple[Optional[float], Optional[float]]:
    """
    Presentation-only savings for one price against the set's mean.

    Returns:
        (mean - price rounded to cents, percent of mean rounded to 2 places);
        (None, None) when there are no statistics
    """
    if statistics is None or statistics.mean <= 0:
        return None, None
    amount = statistics.mean - price
    return round(amount, 2), round(amount / statistics.mean * 100, 2)
