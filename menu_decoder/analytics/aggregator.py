from __future__ import annotations

from collections import Counter
from typing import Any

from .store import LOOKUP_KINDS


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    lookups = [e for e in events if e["type"] in LOOKUP_KINDS]
    total = len(lookups)

    # Per-kind totals and cache hit rate
    by_kind: dict[str, dict[str, Any]] = {}
    for kind in LOOKUP_KINDS:
        of_kind = [e for e in lookups if e["type"] == kind]
        hits = sum(1 for e in of_kind if e.get("cache_hit"))
        by_kind[kind] = {
            "total": len(of_kind),
            "cache_hits": hits,
            "hit_rate": _rate(hits, len(of_kind)),
        }

    times = [e["response_time_ms"] for e in lookups if "response_time_ms" in e]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Which tier answered restaurant lookups
    source_counter: Counter[str] = Counter()
    for e in lookups:
        if e["type"] == "restaurant_lookup":
            source_counter[e.get("source") or "none"] += 1

    cuisine_counter: Counter[str] = Counter()
    for e in lookups:
        if e["type"] == "cuisine_lookup" and e.get("cuisine"):
            cuisine_counter[e["cuisine"]] += 1
    top_cuisines = [{"name": n, "count": c} for n, c in cuisine_counter.most_common(10)]

    cache_hits = sum(1 for e in lookups if e.get("cache_hit"))
    limit_reached = sum(1 for e in lookups if e.get("limit_reached"))

    return {
        "total_lookups": total,
        "avg_response_time_ms": avg_time,
        "by_kind": by_kind,
        "restaurant_sources": dict(source_counter),
        "top_cuisines": top_cuisines,
        "limit_reached": limit_reached,
        "cache_stats": {
            "hits": cache_hits,
            "misses": total - cache_hits,
            "hit_rate": _rate(cache_hits, total),
        },
    }
