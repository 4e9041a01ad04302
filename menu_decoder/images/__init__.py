"""
Best-effort image lookup for dishes and restaurants.

Any failure degrades to an empty URL; image lookup never aborts the
enclosing operation.
"""
