"""End-to-end pricing: comparable listings in, ``PricingAnalysis`` out.

``build_analysis`` is the pure, synchronous core. ``PricingService`` wraps it
with the two external collaborators (trend signal and extra market data),
calling them concurrently and replacing any failure with a default so that a
pricing request never fails because of a flaky dependency.
"""

from __future__ import annotations

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence

from inventory_pricing.models import (
    ComparableAnalysis,
    Listing,
    MarketTrend,
    PriceRange,
    PriceStatistics,
    PricingAnalysis,
    PricingOptions,
    ProductContext,
)
from .adjustments import apply_adjustment_chain
from .aggregator import aggregate, breakdown
from .market_data import HttpMarketDataSource, MarketDataConfig, MarketDataSource
from .market_trends import HttpTrendAnalyzer, TrendAnalyzer, TrendServiceConfig
from .normalizer import ListingSets, normalize_listing_sets
from .outcome import Outcome
from .similarity import DEFAULT_COMPARABLES_LIMIT, average_similarity, rank_comparables
from .strategy import competitive_position, price_bounds, select_price

logger = logging.getLogger(__name__)

TREND_SOURCE = "market_trends"
MARKET_DATA_SOURCE = "market_data"


@dataclass
class PricingConfig:
    collaborator_timeout_secs: float = float(os.environ.get("PRICING_COLLABORATOR_TIMEOUT_SECS", "10"))
    comparables_limit: int = int(os.environ.get("PRICING_COMPARABLES_LIMIT", str(DEFAULT_COMPARABLES_LIMIT)))


def comparable_analysis(stats: PriceStatistics, listings: Sequence[Listing], avg_similarity: float) -> ComparableAnalysis:
    return ComparableAnalysis(
        median_price=stats.median,
        average_price=stats.mean,
        total_comparables=stats.count,
        price_distribution=dict(stats.distribution),
        average_similarity=avg_similarity,
        by_platform=breakdown(listings, "platform"),
        by_condition=breakdown(listings, "condition"),
    )


def build_analysis(
    product: ProductContext,
    listings: Sequence[Listing],
    options: PricingOptions,
    trend: MarketTrend,
    comparables_limit: Optional[int] = DEFAULT_COMPARABLES_LIMIT,
    degraded_sources: Optional[List[str]] = None,
) -> PricingAnalysis:
    """Compute the recommendation from an already normalized listing pool."""
    stats = aggregate(listings)
    trace = apply_adjustment_chain(stats.median, product, options.competitive_position)
    bounds = price_bounds(trace.competitive_price)
    recommended = select_price(bounds, options.strategy, trend)
    comparables = rank_comparables(product.title, listings, limit=comparables_limit)

    logger.debug(
        "base=%.2f condition=%.2f category=%.2f competitive=%.2f",
        trace.base_price,
        trace.condition_adjusted,
        trace.category_adjusted,
        trace.competitive_price,
    )
    return PricingAnalysis(
        recommended_price=recommended,
        price_range=PriceRange(min=bounds.velocity, max=bounds.margin),
        competitive_position=competitive_position(recommended, stats.median),
        velocity_optimized=bounds.velocity,
        margin_optimized=bounds.margin,
        condition_adjustment=trace.condition_multiplier,
        market_trends=trend,
        comparable_analysis=comparable_analysis(stats, listings, average_similarity(comparables)),
        comparable_listings=comparables,
        degraded_sources=list(degraded_sources or []),
    )


class PricingService:
    """Composes normalization, statistics, adjustments and strategy selection.

    Collaborators are injected; either may be omitted, in which case the
    corresponding default (stable trend, no extra listings) is used without a call.
    """

    def __init__(
        self,
        trend_analyzer: TrendAnalyzer | None = None,
        market_data: MarketDataSource | None = None,
        cfg: PricingConfig | None = None,
    ) -> None:
        self.trend_analyzer = trend_analyzer
        self.market_data = market_data
        self.cfg = cfg or PricingConfig()

    async def _guarded(self, name: str, default: Any, fn: Callable[..., Any], *args: Any) -> Outcome[Any]:
        timeout = self.cfg.collaborator_timeout_secs
        # Own pool per call: a timed-out worker must not hold up asyncio.run() at shutdown.
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"pricing-{name}")
        loop = asyncio.get_running_loop()
        try:
            value = await asyncio.wait_for(loop.run_in_executor(pool, fn, *args), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{name} timed out after {timeout:.1f}s; using default")
            return Outcome.fallback(default, f"timed out after {timeout:.1f}s")
        except Exception as e:
            logger.warning(f"{name} failed: {e}; using default")
            return Outcome.fallback(default, str(e) or type(e).__name__)
        finally:
            pool.shutdown(wait=False)
        return Outcome.success(value)

    def _trend(self, product: ProductContext, stats: PriceStatistics) -> MarketTrend:
        result = self.trend_analyzer.analyze(product, stats)  # type: ignore[union-attr]
        if isinstance(result, MarketTrend):
            return result
        return MarketTrend.model_validate(result)

    def _extra_listings(self, product: ProductContext) -> List[Listing]:
        return normalize_listing_sets(self.market_data.fetch(product))  # type: ignore[union-attr]

    async def fetch_trend(self, product: ProductContext, stats: PriceStatistics) -> Outcome[MarketTrend]:
        if self.trend_analyzer is None:
            return Outcome.success(MarketTrend.default())
        return await self._guarded(TREND_SOURCE, MarketTrend.default(), self._trend, product, stats)

    async def fetch_extra_listings(self, product: ProductContext) -> Outcome[List[Listing]]:
        if self.market_data is None:
            return Outcome.success([])
        return await self._guarded(MARKET_DATA_SOURCE, [], self._extra_listings, product)

    async def analyze_pricing(
        self,
        product: ProductContext | Mapping[str, Any],
        market_listing_sets: Optional[ListingSets] = None,
        options: PricingOptions | Mapping[str, Any] | None = None,
    ) -> PricingAnalysis:
        if product is None:
            raise ValueError("product context is required")
        if not isinstance(product, ProductContext):
            product = ProductContext.model_validate(product)
        if not isinstance(options, PricingOptions):
            options = PricingOptions.model_validate(options or {})

        listings = normalize_listing_sets(market_listing_sets)
        trend_outcome, extra_outcome = await asyncio.gather(
            self.fetch_trend(product, aggregate(listings)),
            self.fetch_extra_listings(product),
        )
        degraded = [
            name
            for name, outcome in ((TREND_SOURCE, trend_outcome), (MARKET_DATA_SOURCE, extra_outcome))
            if outcome.degraded
        ]
        pooled = listings + list(extra_outcome.value)

        analysis = build_analysis(
            product,
            pooled,
            options,
            trend_outcome.value,
            comparables_limit=self.cfg.comparables_limit,
            degraded_sources=degraded,
        )
        logger.info(
            f"Priced {product.title or '<untitled>'!r}: ${analysis.recommended_price:.2f} "
            f"from {analysis.comparable_analysis.total_comparables} comparables "
            f"(strategy={options.strategy}, trend={analysis.market_trends.direction})"
        )
        return analysis

    def analyze_pricing_sync(
        self,
        product: ProductContext | Mapping[str, Any],
        market_listing_sets: Optional[ListingSets] = None,
        options: PricingOptions | Mapping[str, Any] | None = None,
    ) -> PricingAnalysis:
        return asyncio.run(self.analyze_pricing(product, market_listing_sets, options))


def make_service(cfg: PricingConfig | None = None) -> PricingService:
    """Factory wiring the HTTP collaborators from environment config.

    A collaborator whose base URL is unset is left out, so the service falls
    back to its defaults without attempting a call.
    """
    trend_cfg = TrendServiceConfig()
    market_cfg = MarketDataConfig()
    trends = HttpTrendAnalyzer(trend_cfg) if trend_cfg.base_url else None
    market = HttpMarketDataSource(market_cfg) if market_cfg.base_url else None
    logger.info(f"Pricing service: trends={'on' if trends else 'off'}, market data={'on' if market else 'off'}")
    return PricingService(trend_analyzer=trends, market_data=market, cfg=cfg)
