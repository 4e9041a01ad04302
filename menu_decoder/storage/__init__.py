"""
Persistent cache store.

Responsibilities:
- Own the async database connection and schema.
- Keep per-day provider usage counters.
- Cache extracted top dishes per restaurant place id.
- Store the generic dish catalog per (cuisine, dish, language).
"""
