from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests

from inventory_pricing.models import Platform, ProductContext
from .http_client import CachedJsonClient, CollaboratorError


@dataclass
class MarketDataConfig:
    base_url: Optional[str] = os.environ.get("MARKET_DATA_URL")
    api_key: Optional[str] = os.environ.get("MARKET_DATA_API_KEY")
    platform: str = os.environ.get("MARKET_DATA_PLATFORM", Platform.FACEBOOK_MARKETPLACE)
    max_results: int = int(os.environ.get("MARKET_DATA_MAX_RESULTS", "25"))
    timeout_secs: float = float(os.environ.get("MARKET_DATA_TIMEOUT_SECS", "30"))
    cache_ttl_secs: int = int(os.environ.get("MARKET_DATA_CACHE_TTL_SECS", str(60 * 60 * 12)))  # 12h
    redis_url: Optional[str] = os.environ.get("REDIS_URL")
    user_agent: str = os.environ.get("HTTP_USER_AGENT", "InventoryPricing/1.0")
    min_interval_secs: float = float(os.environ.get("MARKET_DATA_MIN_INTERVAL_SECS", "0.3"))


def search_query(product: ProductContext) -> str:
    """Primary search query for a product: its title, else brand and category."""
    title = (product.title or "").strip()
    if title:
        return title
    return " ".join(p for p in ((product.brand or "").strip(), (product.category or "").strip()) if p)


class MarketDataSource:
    """Supplies extra raw comparable listings, keyed by platform."""

    def fetch(self, product: ProductContext) -> Mapping[str, List[Any]]:
        raise NotImplementedError


class HttpMarketDataSource(CachedJsonClient, MarketDataSource):
    """Fetches scraped listings from a marketplace scraping service.

    Request: ``GET {base_url}/v1/listings?query=..&category=..&condition=..``.
    Response: ``{"items": [{...raw record...}, ...]}``; a record may carry its
    own ``platform`` key, otherwise the configured platform is assumed.
    """

    cache_prefix = "market"

    def __init__(self, config: MarketDataConfig | None = None, session: Optional[requests.Session] = None) -> None:
        super().__init__(config or MarketDataConfig(), session=session)

    def fetch(self, product: ProductContext) -> Mapping[str, List[Any]]:
        query = search_query(product)
        if not query:
            return {}
        params = {
            "query": query,
            "category": product.category or "",
            "condition": product.condition.grade or "",
            "limit": self.config.max_results,
        }
        cache_key = f"{query.lower()}:{params['category'].lower()}:{params['condition'].lower()}"
        payload = self.request_json("GET", "/v1/listings", cache_key=cache_key, params=params)
        items = payload.get("items")
        if items is None:
            return {}
        if not isinstance(items, list):
            raise CollaboratorError("market data payload 'items' is not a list")
        out: Dict[str, List[Any]] = {}
        for it in items:
            if not isinstance(it, Mapping):
                continue
            plat = str(it.get("platform") or self.config.platform)
            out.setdefault(plat, []).append(dict(it))
        return out
