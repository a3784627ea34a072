from __future__ import annotations

import pytest
import requests

from inventory_pricing.models import ConditionGrade, PriceStatistics, ProductContext
from inventory_pricing.services import (
    CollaboratorError,
    HttpMarketDataSource,
    HttpTrendAnalyzer,
    MarketDataConfig,
    TrendServiceConfig,
)
from inventory_pricing.services.market_data import search_query


class FakeResponse:
    def __init__(self, payload, status: int = 200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, payload, status: int = 200):
        self.payload = payload
        self.status = status
        self.calls: list[dict] = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        return FakeResponse(self.payload, self.status)


PRODUCT = ProductContext(title="Canon EOS R6", category="electronics", brand="canon", condition=ConditionGrade(grade="like-new"))


def trend_cfg(**kw) -> TrendServiceConfig:
    base = dict(base_url="http://trends.test", api_key="k", redis_url=None, min_interval_secs=0.0)
    base.update(kw)
    return TrendServiceConfig(**base)


def market_cfg(**kw) -> MarketDataConfig:
    base = dict(base_url="http://market.test/", api_key=None, redis_url=None, min_interval_secs=0.0, platform="facebook_marketplace")
    base.update(kw)
    return MarketDataConfig(**base)


def test_trend_analyzer_parses_and_caches():
    session = FakeSession({"direction": "up", "confidence": 0.8, "factors": ["new model launch"]})
    client = HttpTrendAnalyzer(trend_cfg(), session=session)

    trend = client.analyze(PRODUCT, PriceStatistics())
    assert trend.direction == "up"
    assert trend.confidence == 0.8
    assert trend.factors == ["new model launch"]

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://trends.test/v1/trends"
    assert call["headers"]["Authorization"] == "Bearer k"
    assert call["json"]["product"]["title"] == "Canon EOS R6"

    client.analyze(PRODUCT, PriceStatistics())
    assert len(session.calls) == 1


def test_trend_analyzer_http_error_raises_collaborator_error():
    client = HttpTrendAnalyzer(trend_cfg(), session=FakeSession({}, status=503))
    with pytest.raises(CollaboratorError):
        client.analyze(PRODUCT, PriceStatistics())


def test_trend_analyzer_bad_json_raises_collaborator_error():
    client = HttpTrendAnalyzer(trend_cfg(), session=FakeSession(ValueError("not json")))
    with pytest.raises(CollaboratorError):
        client.analyze(PRODUCT, PriceStatistics())


def test_unconfigured_client_raises_collaborator_error():
    client = HttpTrendAnalyzer(trend_cfg(base_url=None), session=FakeSession({}))
    with pytest.raises(CollaboratorError):
        client.analyze(PRODUCT, PriceStatistics())


def test_market_data_groups_items_by_platform():
    payload = {
        "items": [
            {"title": "Canon EOS R6 body", "price": "$1,500", "platform": "ebay"},
            {"title": "Canon R6", "salePrice": 1400},
            "garbage",
        ]
    }
    session = FakeSession(payload)
    sets = HttpMarketDataSource(market_cfg(), session=session).fetch(PRODUCT)

    assert set(sets) == {"ebay", "facebook_marketplace"}
    assert sets["facebook_marketplace"][0]["salePrice"] == 1400
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://market.test/v1/listings"
    assert call["params"]["query"] == "Canon EOS R6"
    assert call["params"]["condition"] == "like-new"
    assert "Authorization" not in call["headers"]


def test_market_data_rejects_malformed_items():
    client = HttpMarketDataSource(market_cfg(), session=FakeSession({"items": "nope"}))
    with pytest.raises(CollaboratorError):
        client.fetch(PRODUCT)


def test_search_query_falls_back_to_brand_and_category():
    assert search_query(ProductContext(brand="Canon", category="cameras")) == "Canon cameras"
    assert search_query(ProductContext()) == ""
