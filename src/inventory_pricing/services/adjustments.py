"""Multiplicative price adjustments applied to the base price.

The chain runs in a fixed order: condition, then category and brand, then
competitive positioning. Every step is a pure ``(price, context) -> price``
function so the whole chain is deterministic.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Dict, Optional

from inventory_pricing.models import ConditionGrade, ProductContext
from inventory_pricing.models.pricing import DEFAULT_POSITION

CONDITION_MULTIPLIERS: Dict[str, float] = {
    "new-in-package": 1.0,
    "new": 0.85,
    "like-new": 0.75,
    "good": 0.65,
    "acceptable": 0.45,
    "poor": 0.25,
}
DEFAULT_CONDITION_MULTIPLIER = 0.6

CATEGORY_MULTIPLIERS: Dict[str, float] = {
    "electronics": 0.7,
    "clothing": 0.4,
    "automotive": 0.8,
    "collectibles": 0.9,
    "books": 0.3,
    "home": 0.6,
    "sports": 0.5,
}
DEFAULT_CATEGORY_MULTIPLIER = 0.6

BRAND_MULTIPLIERS: Dict[str, float] = {
    "apple": 0.8,
    "samsung": 0.7,
    "nike": 0.6,
    "adidas": 0.6,
    "louis vuitton": 0.85,
    "gucci": 0.85,
    "rolex": 0.9,
}
DEFAULT_BRAND_MULTIPLIER = 0.6

CATEGORY_WEIGHT = 0.7
BRAND_WEIGHT = 0.3

POSITION_MULTIPLIERS: Dict[str, float] = {
    "aggressive": 0.9,
    "competitive": 0.95,
    "premium": 1.15,
}

SCORE_SPREAD = 0.2
MIN_CONDITION_MULTIPLIER = 0.1
MAX_CONDITION_MULTIPLIER = 1.0


def normalize_grade(grade: str) -> str:
    """``"Like New"`` / ``like_new`` -> ``like-new``."""
    s = (grade or "").strip().lower()
    s = re.sub(r"[\s_]+", "-", s)
    return re.sub(r"[^a-z-]", "", s)


def grade_multiplier(grade: str) -> float:
    return CONDITION_MULTIPLIERS.get(normalize_grade(grade), DEFAULT_CONDITION_MULTIPLIER)


def condition_multiplier(condition: ConditionGrade) -> float:
    """Grade multiplier nudged by the optional score, clamped to [0.1, 1.0]."""
    mult = grade_multiplier(condition.grade)
    if condition.score is not None and math.isfinite(condition.score):
        mult += (condition.score - 0.5) * SCORE_SPREAD
    return max(MIN_CONDITION_MULTIPLIER, min(MAX_CONDITION_MULTIPLIER, mult))


def category_brand_multiplier(category: str, brand: str) -> float:
    cat = CATEGORY_MULTIPLIERS.get((category or "").strip().lower(), DEFAULT_CATEGORY_MULTIPLIER)
    brd = BRAND_MULTIPLIERS.get((brand or "").strip().lower(), DEFAULT_BRAND_MULTIPLIER)
    return CATEGORY_WEIGHT * cat + BRAND_WEIGHT * brd


def position_multiplier(position: Optional[str]) -> float:
    key = (position or "").strip().lower()
    return POSITION_MULTIPLIERS.get(key, POSITION_MULTIPLIERS[DEFAULT_POSITION])


def apply_condition_adjustment(price: float, product: ProductContext) -> float:
    return price * condition_multiplier(product.condition)


def apply_category_adjustment(price: float, product: ProductContext) -> float:
    return price * category_brand_multiplier(product.category, product.brand)


def apply_competitive_positioning(price: float, position: Optional[str]) -> float:
    return price * position_multiplier(position)


@dataclass
class AdjustmentTrace:
    base_price: float
    condition_multiplier: float
    condition_adjusted: float
    category_adjusted: float
    competitive_price: float


def apply_adjustment_chain(base: float, product: ProductContext, position: Optional[str]) -> AdjustmentTrace:
    """Run the three adjustments in their required order and keep each intermediate price."""
    conditioned = apply_condition_adjustment(base, product)
    categorized = apply_category_adjustment(conditioned, product)
    competitive = apply_competitive_positioning(categorized, position)
    return AdjustmentTrace(
        base_price=base,
        condition_multiplier=condition_multiplier(product.condition),
        condition_adjusted=conditioned,
        category_adjusted=categorized,
        competitive_price=competitive,
    )
