from __future__ import annotations

import time
from typing import Any

LOOKUP_KINDS = ("cuisine_lookup", "restaurant_lookup", "extract_dishes")

_events: list[dict[str, Any]] = []


def record_lookup(kind: str, started_at: float, **data: Any) -> None:
    """Append one lookup event, timing it from ``started_at`` (``time.time()``)."""
    now = time.time()
    _events.append({
        "type": kind,
        "timestamp": now,
        "response_time_ms": round((now - started_at) * 1000, 1),
        **data,
    })


def get_events() -> list[dict[str, Any]]:
    return _events


def clear_events() -> None:
    _events.clear()
