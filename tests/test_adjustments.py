from __future__ import annotations

import math

from inventory_pricing.models import ConditionGrade, MarketTrend, PricingOptions, ProductContext
from inventory_pricing.services.adjustments import (
    apply_adjustment_chain,
    category_brand_multiplier,
    condition_multiplier,
    grade_multiplier,
    position_multiplier,
)
from inventory_pricing.services.strategy import (
    INSUFFICIENT_DATA_LABEL,
    competitive_position,
    price_bounds,
    select_price,
)


def test_grade_lookup_and_normalization():
    assert grade_multiplier("good") == 0.65
    assert grade_multiplier("Like New") == 0.75
    assert grade_multiplier("NEW_IN_PACKAGE") == 1.0
    assert grade_multiplier("mint!") == 0.6
    assert grade_multiplier("") == 0.6


def test_condition_score_fine_tunes_and_clamps():
    assert math.isclose(condition_multiplier(ConditionGrade(grade="good", score=0.75)), 0.70)
    assert condition_multiplier(ConditionGrade(grade="new-in-package", score=1.0)) == 1.0
    assert math.isclose(condition_multiplier(ConditionGrade(grade="poor", score=0.0)), 0.15)
    for score in (-10.0, -1.0, 0.0, 0.3, 0.5, 0.9, 1.0, 5.0, 42.0):
        for grade in ("new-in-package", "new", "like-new", "good", "acceptable", "poor", "junk"):
            m = condition_multiplier(ConditionGrade(grade=grade, score=score))
            assert 0.1 <= m <= 1.0


def test_category_brand_blend():
    assert math.isclose(category_brand_multiplier("electronics", "unknown"), 0.67)
    assert math.isclose(category_brand_multiplier("Collectibles", "Rolex"), 0.7 * 0.9 + 0.3 * 0.9)
    assert math.isclose(category_brand_multiplier("", ""), 0.6)


def test_position_multiplier_defaults_to_competitive():
    assert position_multiplier("aggressive") == 0.9
    assert position_multiplier("premium") == 1.15
    assert position_multiplier("sideways") == 0.95
    assert position_multiplier(None) == 0.95


def test_adjustment_chain_matches_worked_example():
    product = ProductContext(title="tv", category="electronics", brand="", condition=ConditionGrade(grade="good"))
    trace = apply_adjustment_chain(100.0, product, "competitive")
    assert math.isclose(trace.condition_adjusted, 65.0)
    assert math.isclose(trace.category_adjusted, 43.55)
    assert math.isclose(trace.competitive_price, 41.3725)
    assert trace.condition_multiplier == 0.65
    # Deterministic: same inputs, same output.
    assert apply_adjustment_chain(100.0, product, "competitive") == trace


def test_strategy_bounds_are_exact():
    bounds = price_bounds(41.3725)
    trend = MarketTrend()
    assert select_price(bounds, "velocity", trend) == 41.3725 * 0.85
    assert select_price(bounds, "margin", trend) == 41.3725 * 1.10


def test_balanced_strategy_follows_confident_trend():
    bounds = price_bounds(100.0)
    assert select_price(bounds, "balanced", MarketTrend(direction="up", confidence=0.9)) == bounds.margin
    assert select_price(bounds, "balanced", MarketTrend(direction="down", confidence=0.9)) == bounds.velocity
    assert select_price(bounds, "balanced", MarketTrend(direction="up", confidence=0.7)) == bounds.competitive
    assert select_price(bounds, "balanced", MarketTrend(direction="stable", confidence=1.0)) == bounds.competitive
    assert select_price(bounds, "bogus", MarketTrend(direction="up", confidence=0.9)) == bounds.margin


def test_competitive_position_labels():
    assert competitive_position(84, 100).startswith("Aggressive")
    assert competitive_position(85, 100).startswith("Competitive")
    assert competitive_position(100, 100).startswith("Market Rate")
    assert competitive_position(110, 100).startswith("Premium")
    assert competitive_position(115, 100).startswith("Luxury")
    assert competitive_position(0, 0) == INSUFFICIENT_DATA_LABEL


def test_invalid_options_fall_back_to_defaults():
    opts = PricingOptions(strategy="yolo", competitive_position="ultra")
    assert opts.strategy == "balanced"
    assert opts.competitive_position == "competitive"
    assert PricingOptions.model_validate({"competitivePosition": "Premium"}).competitive_position == "premium"


def test_market_trend_coercion():
    trend = MarketTrend.model_validate({"direction": "sideways", "confidence": 3, "factors": "seasonal"})
    assert trend.direction == "stable"
    assert trend.confidence == 1.0
    assert trend.factors == ["seasonal"]
    assert MarketTrend.default().factors == ["insufficient data"]


def test_non_finite_score_is_ignored():
    assert condition_multiplier(ConditionGrade(grade="poor", score=float("nan"))) == 0.25
    assert condition_multiplier(ConditionGrade(grade="good", score=float("inf"))) == 0.65
