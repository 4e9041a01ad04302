from __future__ import annotations

import time

from menu_decoder.analytics.aggregator import compute_analytics
from menu_decoder.analytics.store import clear_events, get_events, record_lookup


def test_analytics_empty():
    body = compute_analytics([])
    assert body["total_lookups"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["cache_stats"] == {"hits": 0, "misses": 0, "hit_rate": 0.0}
    assert body["by_kind"]["cuisine_lookup"]["hit_rate"] == 0.0


def test_record_lookup_times_the_event():
    record_lookup("cuisine_lookup", time.time() - 0.25, cuisine="Thai", cache_hit=False)

    event = get_events()[-1]
    assert event["type"] == "cuisine_lookup"
    assert event["cuisine"] == "Thai"
    assert event["response_time_ms"] >= 250


def test_clear_events():
    record_lookup("extract_dishes", time.time())
    clear_events()
    assert get_events() == []


def test_analytics_aggregates_lookups():
    now = time.time()
    record_lookup("cuisine_lookup", now, cuisine="Thai", cache_hit=True)
    record_lookup("cuisine_lookup", now, cuisine="Thai", cache_hit=False)
    record_lookup("cuisine_lookup", now, cuisine="Greek", cache_hit=False, limit_reached=True)
    record_lookup("restaurant_lookup", now, source="yelp", cache_hit=False)
    record_lookup("restaurant_lookup", now, source=None, cache_hit=False)
    record_lookup("extract_dishes", now, cache_hit=True)

    body = compute_analytics(get_events())

    assert body["total_lookups"] == 6
    assert body["by_kind"]["cuisine_lookup"] == {"total": 3, "cache_hits": 1, "hit_rate": 33.3}
    assert body["by_kind"]["extract_dishes"]["hit_rate"] == 100.0
    assert body["restaurant_sources"] == {"yelp": 1, "none": 1}
    assert body["top_cuisines"][0] == {"name": "Thai", "count": 2}
    assert body["limit_reached"] == 1
    assert body["cache_stats"]["hits"] == 2
    assert body["cache_stats"]["misses"] == 4


def test_analytics_ignores_unknown_event_types():
    get_events().append({"type": "page_view", "timestamp": time.time()})
    assert compute_analytics(get_events())["total_lookups"] == 0
