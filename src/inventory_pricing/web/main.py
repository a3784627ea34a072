from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Optional, Union

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from inventory_pricing.filters import ComparableFilter, ComparableFilterConfig
from inventory_pricing.models import PricingOptions, ProductContext
from inventory_pricing.services import PricingService, make_service
from inventory_pricing.services.normalizer import normalize_listing_sets
from inventory_pricing.services.similarity import DEFAULT_COMPARABLES_LIMIT, rank_comparables, summarize_comparables
from inventory_pricing.utils.log import configure_logging

RawListings = Union[Dict[str, List[Dict[str, Any]]], List[Dict[str, Any]]]

configure_logging()
app = FastAPI(title="Inventory Pricing")


class PricingRequest(BaseModel):
    product: ProductContext
    listings: RawListings = Field(default_factory=list)
    options: PricingOptions = Field(default_factory=PricingOptions)


class ComparablesRequest(BaseModel):
    title: str
    listings: RawListings = Field(default_factory=list)
    platforms: List[str] = []
    min_similarity: Optional[float] = None
    exclude_keywords: List[str] = []
    sold_only: bool = False
    limit: int = DEFAULT_COMPARABLES_LIMIT


@lru_cache(maxsize=1)
def get_pricing_service() -> PricingService:
    return make_service()


@app.get("/health")
def health() -> JSONResponse:
    return JSONResponse({"status": "ok"})


@app.post("/pricing")
async def pricing(req: PricingRequest, service: PricingService = Depends(get_pricing_service)) -> JSONResponse:
    analysis = await service.analyze_pricing(req.product, req.listings, req.options)
    return JSONResponse(analysis.model_dump(mode="json", by_alias=True))


@app.post("/comparables")
def comparables(req: ComparablesRequest) -> JSONResponse:
    clf = ComparableFilter(
        ComparableFilterConfig(
            platforms=req.platforms,
            min_similarity=req.min_similarity,
            exclude_keywords=req.exclude_keywords,
            sold_only=req.sold_only,
        )
    )
    scored = rank_comparables(req.title, normalize_listing_sets(req.listings), limit=req.limit, comparable_filter=clf)
    return JSONResponse(
        {
            "comparables": [s.model_dump(mode="json", by_alias=True) for s in scored],
            "statistics": summarize_comparables(scored).model_dump(mode="json", by_alias=True),
        }
    )
