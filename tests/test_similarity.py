from __future__ import annotations

from inventory_pricing.filters import ComparableFilter, ComparableFilterConfig
from inventory_pricing.models import Listing
from inventory_pricing.services.similarity import rank_comparables, similarity, summarize_comparables


def test_similarity_basic_cases():
    assert similarity("Apple iPhone 12", "apple iphone 12 pro") == 0.75
    assert similarity("Apple iPhone 12", "Apple iPhone 12") == 1.0
    assert similarity("red bike", "blue car") == 0.0
    assert similarity("", "") == 0.0
    assert similarity("", "something") == 0.0


def test_similarity_is_symmetric_and_collapses_duplicates():
    pairs = [
        ("Nike Air Max 90", "nike air force 1"),
        ("a a b", "a b c"),
        ("Samsung Galaxy S21 Ultra 256GB", "galaxy s21"),
    ]
    for a, b in pairs:
        assert similarity(a, b) == similarity(b, a)
    assert similarity("a a b", "a b") == 1.0


def test_rank_comparables_orders_by_similarity_and_drops_unpriced():
    listings = [
        Listing(platform="ebay", title="iphone case", price=10),
        Listing(platform="ebay", title="apple iphone 12", price=300),
        Listing(platform="ebay", title="apple iphone 12 pro", price=0),
        Listing(platform="ebay", title="apple iphone 12 64gb", price=280),
    ]
    ranked = rank_comparables("Apple iPhone 12", listings)
    assert [s.listing.price for s in ranked] == [300, 280, 10]
    assert ranked[0].similarity == 1.0

    assert len(rank_comparables("Apple iPhone 12", listings, limit=1)) == 1


def test_rank_comparables_dedupes_urls_and_applies_filter():
    listings = [
        Listing(platform="ebay", title="apple iphone 12", price=300, url="http://x/1"),
        Listing(platform="ebay", title="apple iphone 12", price=310, url="http://x/1"),
        Listing(platform="google_shopping", title="apple iphone 12 broken", price=90, url="http://x/2"),
        Listing(platform="google_shopping", title="apple iphone 12", price=320),
    ]
    assert len(rank_comparables("apple iphone 12", listings)) == 3

    clf = ComparableFilter(ComparableFilterConfig(platforms=["google_shopping"], exclude_keywords=["broken"]))
    ranked = rank_comparables("apple iphone 12", listings, comparable_filter=clf)
    assert [s.listing.price for s in ranked] == [320]


def test_comparable_filter_reasons():
    clf = ComparableFilter(ComparableFilterConfig(min_similarity=0.5, sold_only=True))
    sold = Listing(title="x", price=1, is_sold=True)
    active = Listing(title="x", price=1)
    assert clf.apply(sold, 0.6).included
    assert clf.apply(sold, 0.4).reasons == ["below_min_similarity"]
    assert clf.apply(active, 0.9).reasons == ["not_sold"]


def test_summarize_comparables():
    ranked = rank_comparables(
        "lego castle",
        [Listing(title="lego castle", price=100), Listing(title="lego", price=50)],
    )
    summary = summarize_comparables(ranked)
    assert summary.total_listings == 2
    assert summary.average_price == 75.0
    assert summary.average_similarity == 0.75
    assert summary.price_range.min == 50
    assert summary.price_range.max == 100
    assert summarize_comparables([]).total_listings == 0
