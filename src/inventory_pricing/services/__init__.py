"""Service layer for the inventory pricing engine."""

from .http_client import CollaboratorError
from .market_data import HttpMarketDataSource, MarketDataConfig, MarketDataSource
from .market_trends import HttpTrendAnalyzer, TrendAnalyzer, TrendServiceConfig
from .pricing import PricingConfig, PricingService, build_analysis, make_service

__all__ = [
    "CollaboratorError",
    "HttpMarketDataSource",
    "HttpTrendAnalyzer",
    "MarketDataConfig",
    "MarketDataSource",
    "PricingConfig",
    "PricingService",
    "TrendAnalyzer",
    "TrendServiceConfig",
    "build_analysis",
    "make_service",
]
