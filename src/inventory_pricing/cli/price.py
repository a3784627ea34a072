from __future__ import annotations

import argparse
import json
from pathlib import Path

from inventory_pricing.models import ConditionGrade, PricingOptions, ProductContext
from inventory_pricing.services import make_service
from inventory_pricing.utils.log import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recommend a price from comparable listings JSON")
    parser.add_argument("file", type=Path, help="Path to listings.json (list of records or {platform: [records]})")
    parser.add_argument("--title", default="", help="Title of the item being priced")
    parser.add_argument("--category", default="")
    parser.add_argument("--brand", default="")
    parser.add_argument("--condition", default="", help="Condition grade, e.g. new, like-new, good")
    parser.add_argument("--score", type=float, default=None, help="Optional condition score in [0, 1]")
    parser.add_argument("--strategy", default="balanced", help="velocity, margin or balanced")
    parser.add_argument("--position", default="competitive", help="aggressive, competitive or premium")
    parser.add_argument("--log-level", default=None)
    return parser


def main() -> None:
    args = build_parser().parse_args()
    configure_logging(args.log_level)

    data = json.loads(args.file.read_text(encoding="utf-8"))
    product = ProductContext(
        title=args.title,
        category=args.category,
        brand=args.brand,
        condition=ConditionGrade(grade=args.condition, score=args.score),
    )
    options = PricingOptions(strategy=args.strategy, competitive_position=args.position)

    service = make_service()
    analysis = service.analyze_pricing_sync(product, data, options)
    print(json.dumps(analysis.model_dump(mode="json", by_alias=True), indent=2))


if __name__ == "__main__":
    main()
