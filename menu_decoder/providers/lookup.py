from __future__ import annotations

import logging
import time
from collections.abc import Sequence

import httpx
from databases import Database

from ..analytics.store import record_lookup
from ..dishes.config import DEFAULT_DISHES_CONFIG, DishesConfig
from ..dishes.extraction import extract_dishes
from ..dishes.models import ExtractDishesRequest
from ..images.config import DEFAULT_IMAGE_CONFIG, ImageConfig
from ..images.unsplash import search_image
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..storage.repositories import RestaurantCacheRepository
from ..usage.config import DEFAULT_USAGE_LIMITS, UsageLimits
from .base import ProviderAdapter
from .models import CandidateRestaurant, RestaurantLookupResult, RestaurantQuery
from .tiers import find_restaurant

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "No restaurant found. Try a different search term."
CACHE_SEARCH_LIMIT = 5


async def _cached_restaurant(db: Database, text: str) -> RestaurantLookupResult | None:
    if not text:
        return None
    matches = await RestaurantCacheRepository(db).search_by_name(text, limit=CACHE_SEARCH_LIMIT)
    fresh = [m for m in matches if m.is_fresh()]
    if not fresh:
        return None
    entry = fresh[0]
    logger.info("Restaurant cache hit for %r: %s", text, entry.place_id)
    return RestaurantLookupResult(
        restaurant=CandidateRestaurant.from_cache(entry),
        top_dishes=entry.top_dishes,
        from_cache=True,
    )


async def lookup_restaurant(
    text: str,
    db: Database,
    client: httpx.AsyncClient,
    lat: float | None = None,
    lng: float | None = None,
    extract: bool = False,
    tiers: Sequence[ProviderAdapter] | None = None,
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
    image_config: ImageConfig = DEFAULT_IMAGE_CONFIG,
    limits: UsageLimits = DEFAULT_USAGE_LIMITS,
    dishes_config: DishesConfig = DEFAULT_DISHES_CONFIG,
) -> RestaurantLookupResult:
    """
    Resolve a free-text restaurant search.

    Fresh cache rows whose name contains the query win. Otherwise the provider
    tiers run on the split query, a missing image is looked up best-effort,
    and with ``extract`` the review-bearing result goes straight through dish
    extraction (``LLMError`` propagates).
    """
    started_at = time.time()
    query = RestaurantQuery.from_text(text, lat, lng)

    result = await _cached_restaurant(db, query.text)
    if result is None:
        candidate = await find_restaurant(query, db, client, tiers=tiers, limits=limits)
        if candidate is None:
            result = RestaurantLookupResult(error=NOT_FOUND_MESSAGE)
        else:
            if not candidate.image_url:
                image_url = await search_image(candidate.name, client, image_config)
                candidate = candidate.model_copy(update={"image_url": image_url})
            result = RestaurantLookupResult(
                restaurant=candidate,
                needs_extraction=bool(candidate.reviews),
            )

    restaurant = result.restaurant
    if extract and result.needs_extraction and restaurant is not None:
        extraction = await extract_dishes(
            ExtractDishesRequest(**restaurant.model_dump()),
            db,
            llm_config=llm_config,
            limits=limits,
            config=dishes_config,
        )
        result = result.model_copy(update={
            "top_dishes": extraction.top_dishes,
            "limit_reached": extraction.limit_reached,
            "needs_extraction": extraction.limit_reached,
            "error": extraction.error,
        })

    record_lookup(
        "restaurant_lookup",
        started_at,
        query=query.text,
        source=restaurant.source if restaurant is not None else None,
        cache_hit=result.from_cache,
        limit_reached=result.limit_reached,
    )
    return result
