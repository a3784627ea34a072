from __future__ import annotations

from typing import Iterable, List, Optional, Set

from inventory_pricing.filters import ComparableFilter
from inventory_pricing.models import ComparableSummary, Listing, PriceRange, ScoredListing

DEFAULT_COMPARABLES_LIMIT = 20


def tokens(title: str) -> Set[str]:
    return set((title or "").lower().split())


def similarity(title1: str, title2: str) -> float:
    """Jaccard index of the lowercase whitespace token sets; 0.0 when both are empty."""
    a = tokens(title1)
    b = tokens(title2)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def dedupe_by_url(listings: Iterable[Listing]) -> List[Listing]:
    """Drop later listings that repeat an earlier URL. Listings without a URL are kept."""
    seen: Set[str] = set()
    out: List[Listing] = []
    for listing in listings:
        if listing.url:
            if listing.url in seen:
                continue
            seen.add(listing.url)
        out.append(listing)
    return out


def rank_comparables(
    title: str,
    listings: Iterable[Listing],
    limit: Optional[int] = DEFAULT_COMPARABLES_LIMIT,
    comparable_filter: Optional[ComparableFilter] = None,
) -> List[ScoredListing]:
    """Tag listings with their similarity to ``title`` and return the best matches first.

    Only priced listings are considered. The sort is stable, so ties keep
    their input order. Pass ``limit=None`` to keep everything.
    """
    scored: List[ScoredListing] = []
    for listing in dedupe_by_url(listings):
        if listing.price <= 0:
            continue
        score = similarity(title, listing.title)
        if comparable_filter is not None and not comparable_filter.apply(listing, score).included:
            continue
        scored.append(ScoredListing(listing=listing, similarity=score))
    scored.sort(key=lambda s: s.similarity, reverse=True)
    if limit is not None:
        scored = scored[: max(0, limit)]
    return scored


def average_similarity(scored: List[ScoredListing]) -> float:
    if not scored:
        return 0.0
    return sum(s.similarity for s in scored) / len(scored)


def summarize_comparables(scored: List[ScoredListing]) -> ComparableSummary:
    if not scored:
        return ComparableSummary()
    prices = [s.listing.price for s in scored]
    return ComparableSummary(
        total_listings=len(scored),
        average_price=sum(prices) / len(prices),
        average_similarity=average_similarity(scored),
        price_range=PriceRange(min=min(prices), max=max(prices)),
    )
