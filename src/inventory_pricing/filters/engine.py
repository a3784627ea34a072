from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from pydantic import BaseModel

from inventory_pricing.models import Listing


class ComparableFilterConfig(BaseModel):
    platforms: List[str] = []
    min_similarity: Optional[float] = None
    exclude_keywords: List[str] = []
    sold_only: bool = False


@dataclass
class FilterResult:
    included: bool
    reasons: List[str]


class ComparableFilter:
    """Decide whether a scored listing belongs in the comparables view."""

    def __init__(self, config: ComparableFilterConfig | None = None) -> None:
        self.config = config or ComparableFilterConfig()

    def apply(self, listing: Listing, similarity: float) -> FilterResult:
        reasons: List[str] = []

        platforms = self._norm(self.config.platforms)
        if platforms and listing.platform.lower() not in platforms:
            reasons.append(f"platform:{listing.platform}")
            return FilterResult(False, reasons)

        if self.config.min_similarity is not None and similarity < self.config.min_similarity:
            reasons.append("below_min_similarity")
            return FilterResult(False, reasons)

        if self.config.sold_only and not listing.is_sold:
            reasons.append("not_sold")
            return FilterResult(False, reasons)

        text = (listing.title or "").lower()
        for kw in self._norm(self.config.exclude_keywords):
            if kw in text:
                reasons.append(f"exclude:{kw}")
                return FilterResult(False, reasons)

        return FilterResult(True, reasons)

    @staticmethod
    def _norm(words: Iterable[str]) -> List[str]:
        return [w.strip().lower() for w in words if w and w.strip()]
