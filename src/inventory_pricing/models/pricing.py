"""Records flowing through the pricing pipeline: inputs, statistics and the final analysis."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .listing import ScoredListing

logger = logging.getLogger(__name__)

Strategy = Literal["velocity", "margin", "balanced"]
Position = Literal["aggressive", "competitive", "premium"]
Direction = Literal["up", "down", "stable"]

STRATEGIES = ("velocity", "margin", "balanced")
POSITIONS = ("aggressive", "competitive", "premium")
DIRECTIONS = ("up", "down", "stable")

DEFAULT_STRATEGY: Strategy = "balanced"
DEFAULT_POSITION: Position = "competitive"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConditionGrade(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    grade: str = ""
    # Intra-grade nuance in [0, 1]; out-of-range values are clamped downstream, NaN and inf ignored.
    score: Optional[float] = None


class ProductContext(_CamelModel):
    """The item being priced. Frozen for the duration of one computation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str = ""
    category: str = ""
    brand: str = ""
    condition: ConditionGrade = Field(default_factory=ConditionGrade)

    @field_validator("condition", mode="before")
    @classmethod
    def _grade_from_string(cls, v: Any) -> Any:
        if v is None:
            return ConditionGrade()
        if isinstance(v, str):
            return {"grade": v}
        return v


class PricingOptions(_CamelModel):
    """Caller preferences. Unknown values fall back to the defaults instead of failing."""

    strategy: Strategy = DEFAULT_STRATEGY
    competitive_position: Position = DEFAULT_POSITION

    @field_validator("strategy", mode="before")
    @classmethod
    def _coerce_strategy(cls, v: Any) -> str:
        s = str(v or "").strip().lower()
        if s not in STRATEGIES:
            if v not in (None, ""):
                logger.warning("Unknown pricing strategy %r, using %s", v, DEFAULT_STRATEGY)
            return DEFAULT_STRATEGY
        return s

    @field_validator("competitive_position", mode="before")
    @classmethod
    def _coerce_position(cls, v: Any) -> str:
        s = str(v or "").strip().lower()
        if s not in POSITIONS:
            if v not in (None, ""):
                logger.warning("Unknown competitive position %r, using %s", v, DEFAULT_POSITION)
            return DEFAULT_POSITION
        return s


class MarketTrend(_CamelModel):
    direction: Direction = "stable"
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    factors: List[str] = Field(default_factory=list)

    @field_validator("direction", mode="before")
    @classmethod
    def _coerce_direction(cls, v: Any) -> str:
        s = str(v or "").strip().lower()
        return s if s in DIRECTIONS else "stable"

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> float:
        try:
            c = float(v)
        except (TypeError, ValueError):
            return 0.5
        if c != c:  # NaN
            return 0.5
        return max(0.0, min(1.0, c))

    @field_validator("factors", mode="before")
    @classmethod
    def _coerce_factors(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(f) for f in v]

    @classmethod
    def default(cls) -> "MarketTrend":
        return cls(direction="stable", confidence=0.5, factors=["insufficient data"])


class GroupStats(_CamelModel):
    count: int = 0
    avg_price: float = 0.0


class PriceStatistics(_CamelModel):
    """Aggregate over the positive-priced listings of a pooled set."""

    median: float = 0.0
    mean: float = 0.0
    min: float = 0.0
    max: float = 0.0
    count: int = 0
    distribution: Dict[str, int] = Field(default_factory=dict)
    insufficient_data: bool = True


class PriceRange(_CamelModel):
    min: float = 0.0
    max: float = 0.0


class ComparableSummary(_CamelModel):
    total_listings: int = 0
    average_price: float = 0.0
    average_similarity: float = 0.0
    price_range: PriceRange = Field(default_factory=PriceRange)


class ComparableAnalysis(_CamelModel):
    median_price: float = 0.0
    average_price: float = 0.0
    total_comparables: int = 0
    price_distribution: Dict[str, int] = Field(default_factory=dict)
    average_similarity: float = 0.0
    by_platform: Dict[str, GroupStats] = Field(default_factory=dict)
    by_condition: Dict[str, GroupStats] = Field(default_factory=dict)


class PricingAnalysis(_CamelModel):
    """Final recommendation. Entirely derived; recomputed per request."""

    recommended_price: float
    price_range: PriceRange
    competitive_position: str
    velocity_optimized: float
    margin_optimized: float
    condition_adjustment: float
    market_trends: MarketTrend
    comparable_analysis: ComparableAnalysis
    comparable_listings: List[ScoredListing] = Field(default_factory=list)
    # Names of collaborators that failed and were replaced by defaults.
    degraded_sources: List[str] = Field(default_factory=list)
