from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass
from typing import Optional

import requests
from pydantic import ValidationError

from inventory_pricing.models import MarketTrend, PriceStatistics, ProductContext
from .http_client import CachedJsonClient, CollaboratorError


@dataclass
class TrendServiceConfig:
    base_url: Optional[str] = os.environ.get("TREND_SERVICE_URL")
    api_key: Optional[str] = os.environ.get("TREND_SERVICE_API_KEY")
    timeout_secs: float = float(os.environ.get("TREND_SERVICE_TIMEOUT_SECS", "15"))
    cache_ttl_secs: int = int(os.environ.get("TREND_CACHE_TTL_SECS", str(60 * 60 * 6)))  # 6h
    redis_url: Optional[str] = os.environ.get("REDIS_URL")
    user_agent: str = os.environ.get("HTTP_USER_AGENT", "InventoryPricing/1.0")
    min_interval_secs: float = float(os.environ.get("TREND_SERVICE_MIN_INTERVAL_SECS", "0.3"))


class TrendAnalyzer:
    """Source of the market-trend signal used by the balanced strategy."""

    def analyze(self, product: ProductContext, stats: PriceStatistics) -> MarketTrend:
        raise NotImplementedError


class HttpTrendAnalyzer(CachedJsonClient, TrendAnalyzer):
    """Asks a trend-analysis service (typically LLM-backed) for direction and confidence.

    Request: ``POST {base_url}/v1/trends`` with the product and its price statistics.
    Response: ``{"direction": "up|down|stable", "confidence": 0.85, "factors": [...]}``.
    """

    cache_prefix = "trends"

    def __init__(self, config: TrendServiceConfig | None = None, session: Optional[requests.Session] = None) -> None:
        super().__init__(config or TrendServiceConfig(), session=session)

    def analyze(self, product: ProductContext, stats: PriceStatistics) -> MarketTrend:
        body = {
            "product": product.model_dump(mode="json", by_alias=True),
            "statistics": stats.model_dump(mode="json", by_alias=True),
        }
        digest = hashlib.sha1(json.dumps(body, sort_keys=True).encode("utf-8")).hexdigest()
        payload = self.request_json("POST", "/v1/trends", cache_key=digest, json=body)
        try:
            return MarketTrend.model_validate(payload)
        except ValidationError as e:
            raise CollaboratorError(f"unusable trend payload: {e}") from e
