"""Data models for comparable marketplace listings."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Platform:
    """Known listing sources. The set is open-ended; any string is accepted."""

    EBAY = "ebay"
    GOOGLE_SHOPPING = "google_shopping"
    FACEBOOK_MARKETPLACE = "facebook_marketplace"
    UNKNOWN = "unknown"


class Listing(BaseModel):
    """A single comparable product observation from an external marketplace."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    platform: str = Platform.UNKNOWN
    title: str = ""
    price: float = Field(default=0.0, ge=0.0)
    condition: Optional[str] = None
    url: Optional[str] = None
    seller: Optional[str] = None
    shipping_cost: Optional[float] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    # Carried through but never used to filter or weight statistics.
    is_sold: bool = False


class ScoredListing(BaseModel):
    """A listing tagged with its title similarity to the product being priced."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    listing: Listing
    similarity: float = Field(ge=0.0, le=1.0)
