"""Adapters turning raw marketplace records into uniform ``Listing`` objects.

Scrapers for different marketplaces name their fields differently and
express prices either as numbers or as display strings ("$1,234.56").
Everything here is pure and never raises for bad data: a record whose price
cannot be read gets ``price=0`` and is excluded from statistics later on.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from inventory_pricing.models import Listing, Platform

# Field name variants seen across scraper outputs, in lookup order.
FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "title": ("title", "name", "itemTitle"),
    "price": ("price", "salePrice", "sale_price", "currentPrice", "current_price", "soldPrice", "sold_price"),
    "condition": ("condition", "conditionText", "itemCondition"),
    "url": ("url", "itemUrl", "item_url", "link"),
    "seller": ("seller", "sellerName", "seller_name", "merchantName", "merchant"),
    "shipping_cost": ("shippingCost", "shipping_cost", "shipping"),
    "location": ("location", "itemLocation", "area"),
    "image_url": ("imageUrl", "image_url", "image", "thumbnail"),
    "is_sold": ("isSold", "is_sold", "sold"),
}

KNOWN_PLATFORMS = {
    "ebay": Platform.EBAY,
    "googleshopping": Platform.GOOGLE_SHOPPING,
    "facebook": Platform.FACEBOOK_MARKETPLACE,
    "facebookmarketplace": Platform.FACEBOOK_MARKETPLACE,
}

RawRecord = Mapping[str, Any]
ListingSets = Union[Mapping[str, Iterable[Any]], Iterable[Any]]


def parse_price(value: Any) -> float:
    """Coerce a price-like value into a non-negative float, or 0 when unreadable.

    Strings keep only digits, ``.`` and ``,``; commas are treated as thousands
    separators and dropped. Price objects of the ``{"value": ..}`` shape used by
    some marketplace APIs are unwrapped.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, Mapping):
        for key in ("value", "amount", "price"):
            if key in value:
                return parse_price(value[key])
        return 0.0
    if isinstance(value, (int, float)):
        try:
            num = float(value)
        except OverflowError:
            return 0.0
    else:
        cleaned = re.sub(r"[^0-9.,]", "", str(value)).replace(",", "")
        if not cleaned:
            return 0.0
        try:
            num = float(cleaned)
        except ValueError:
            return 0.0
    if math.isnan(num) or math.isinf(num) or num < 0:
        return 0.0
    return num


def normalize_platform(name: Any) -> str:
    """``googleShopping`` / ``Google Shopping`` -> ``google_shopping``."""
    s = str(name or "").strip()
    if not s:
        return Platform.UNKNOWN
    known = KNOWN_PLATFORMS.get(re.sub(r"[^a-z0-9]", "", s.lower()))
    if known:
        return known
    s = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", s)
    s = re.sub(r"[^a-zA-Z0-9]+", "_", s).strip("_").lower()
    return s or Platform.UNKNOWN


def _pick(raw: RawRecord, field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        val = raw.get(key)
        if val not in (None, ""):
            return val
    return None


def _text(val: Any) -> Optional[str]:
    if val is None:
        return None
    s = str(val).strip()
    return s or None


def _flag(val: Any) -> bool:
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes", "sold")
    return bool(val)


def normalize_listing(raw: Any, platform: Optional[str] = None) -> Listing:
    """Build a ``Listing`` from one raw record. Already-normalized listings pass through."""
    if isinstance(raw, Listing):
        return raw
    if not isinstance(raw, Mapping):
        raw = {}
    plat = normalize_platform(platform or raw.get("platform") or raw.get("source"))
    shipping = _pick(raw, "shipping_cost")
    return Listing(
        platform=plat,
        title=_text(_pick(raw, "title")) or "",
        price=parse_price(_pick(raw, "price")),
        condition=_text(_pick(raw, "condition")),
        url=_text(_pick(raw, "url")),
        seller=_text(_pick(raw, "seller")),
        shipping_cost=parse_price(shipping) if shipping is not None else None,
        location=_text(_pick(raw, "location")),
        image_url=_text(_pick(raw, "image_url")),
        is_sold=_flag(_pick(raw, "is_sold")),
    )


def normalize_listings(records: Iterable[Any], platform: Optional[str] = None) -> List[Listing]:
    return [normalize_listing(r, platform) for r in records or []]


def normalize_listing_sets(sets: Optional[ListingSets]) -> List[Listing]:
    """Flatten per-platform record sets (or a flat record list) into one listing pool."""
    if not sets:
        return []
    if isinstance(sets, Mapping):
        out: List[Listing] = []
        for plat, records in sets.items():
            if records is None or isinstance(records, (str, bytes, Mapping)):
                continue
            out.extend(normalize_listings(records, plat))
        return out
    return normalize_listings(sets)
