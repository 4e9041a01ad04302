from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DishesConfig:
    review_limit: int = 20
    catalog_dish_count: str = "10-15"
    # Bulk pre-generation
    pregenerate_dish_count: str = "12"
    pregenerate_language: str = "English"
    pregenerate_language_code: str = "en"
    populated_threshold: int = 5
    pregenerate_delay: float = 2.0


DEFAULT_DISHES_CONFIG = DishesConfig()
