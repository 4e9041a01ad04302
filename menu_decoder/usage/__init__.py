"""
Daily usage limiter for metered providers.

Responsibilities:
- Track one counter per provider per UTC day in the cache store.
- Report whether a provider is still under its daily cap.
- Increment counters atomically, creating the day's row lazily.
"""
