"""Price statistics over a pooled set of comparable listings.

All platforms are pooled into a single price set before computing anything;
platforms are not weighted by reliability. Listings priced at or below zero
never contribute.
"""

from __future__ import annotations

import statistics
from collections import OrderedDict
from typing import Dict, Iterable, List, Sequence, Tuple

from inventory_pricing.models import GroupStats, Listing, PriceStatistics

# (label, exclusive upper bound); the last band is open-ended.
PRICE_BANDS: Sequence[Tuple[str, float]] = (
    ("Under $25", 25.0),
    ("$25-$50", 50.0),
    ("$50-$100", 100.0),
    ("$100-$250", 250.0),
    ("$250-$500", 500.0),
    ("Over $500", float("inf")),
)


def positive_prices(listings: Iterable[Listing]) -> List[float]:
    return [listing.price for listing in listings if listing.price > 0]


def median(prices: Sequence[float]) -> float:
    """Median of ``prices``; the two middle values are averaged for even counts."""
    if not prices:
        return 0.0
    return float(statistics.median(prices))


def base_price(listings: Iterable[Listing]) -> float:
    """Median of the pooled positive prices, or 0 when there are none."""
    return median(positive_prices(listings))


def distribution(prices: Iterable[float]) -> Dict[str, int]:
    buckets: Dict[str, int] = OrderedDict((label, 0) for label, _ in PRICE_BANDS)
    for p in prices:
        for label, upper in PRICE_BANDS:
            if p < upper:
                buckets[label] += 1
                break
    return dict(buckets)


def aggregate(listings: Iterable[Listing]) -> PriceStatistics:
    prices = positive_prices(listings)
    if not prices:
        return PriceStatistics(distribution=distribution([]), insufficient_data=True)
    return PriceStatistics(
        median=median(prices),
        mean=statistics.fmean(prices),
        min=min(prices),
        max=max(prices),
        count=len(prices),
        distribution=distribution(prices),
        insufficient_data=False,
    )


def breakdown(listings: Iterable[Listing], field: str) -> Dict[str, GroupStats]:
    """Count and average price per value of ``field`` (e.g. ``platform``, ``condition``)."""
    sums: Dict[str, Tuple[int, float]] = {}
    for listing in listings:
        if listing.price <= 0:
            continue
        key = str(getattr(listing, field, None) or "Unknown")
        n, total = sums.get(key, (0, 0.0))
        sums[key] = (n + 1, total + listing.price)
    return {k: GroupStats(count=n, avg_price=total / n) for k, (n, total) in sums.items()}
