from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from inventory_pricing.models import MarketTrend
from inventory_pricing.models.pricing import DEFAULT_STRATEGY

VELOCITY_FACTOR = 0.85
MARGIN_FACTOR = 1.10
TREND_CONFIDENCE_THRESHOLD = 0.7

# (exclusive upper bound of recommended/base, label)
POSITION_LABELS = (
    (0.85, "Aggressive - Priced for quick sale"),
    (0.95, "Competitive - Priced to move"),
    (1.05, "Market Rate - Fair market pricing"),
    (1.15, "Premium - Higher margin positioning"),
)
LUXURY_LABEL = "Luxury - Premium market positioning"
INSUFFICIENT_DATA_LABEL = "Insufficient Data - No comparable prices"


@dataclass
class PriceBounds:
    competitive: float
    velocity: float
    margin: float


def price_bounds(competitive_price: float) -> PriceBounds:
    return PriceBounds(
        competitive=competitive_price,
        velocity=competitive_price * VELOCITY_FACTOR,
        margin=competitive_price * MARGIN_FACTOR,
    )


def select_price(bounds: PriceBounds, strategy: Optional[str], trend: MarketTrend) -> float:
    """Pick the recommended price. Unknown strategies behave as ``balanced``."""
    s = (strategy or DEFAULT_STRATEGY).strip().lower()
    if s == "velocity":
        return bounds.velocity
    if s == "margin":
        return bounds.margin
    if trend.confidence > TREND_CONFIDENCE_THRESHOLD:
        if trend.direction == "up":
            return bounds.margin
        if trend.direction == "down":
            return bounds.velocity
    return bounds.competitive


def competitive_position(recommended_price: float, base_price: float) -> str:
    if base_price <= 0:
        return INSUFFICIENT_DATA_LABEL
    ratio = recommended_price / base_price
    for upper, label in POSITION_LABELS:
        if ratio < upper:
            return label
    return LUXURY_LABEL
