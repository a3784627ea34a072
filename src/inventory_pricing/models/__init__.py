"""Record types for listings and pricing results."""

from .listing import Listing, Platform, ScoredListing
from .pricing import (
    ComparableAnalysis,
    ComparableSummary,
    ConditionGrade,
    GroupStats,
    MarketTrend,
    PriceRange,
    PriceStatistics,
    PricingAnalysis,
    PricingOptions,
    ProductContext,
)

__all__ = [
    "ComparableAnalysis",
    "ComparableSummary",
    "ConditionGrade",
    "GroupStats",
    "Listing",
    "MarketTrend",
    "Platform",
    "PriceRange",
    "PriceStatistics",
    "PricingAnalysis",
    "PricingOptions",
    "ProductContext",
    "ScoredListing",
]
