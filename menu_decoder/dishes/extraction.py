from __future__ import annotations

import logging
import time

from databases import Database
from pydantic import ValidationError

from ..analytics.store import record_lookup
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import chat_completion
from ..llm.parsing import LLMResponseError, parse_json_list
from ..storage.repositories import RestaurantCacheRepository
from ..usage.config import DEFAULT_USAGE_LIMITS, LIMIT_REACHED_MESSAGE, Provider, UsageLimits
from ..usage.limiter import can_call, increment
from .config import DEFAULT_DISHES_CONFIG, DishesConfig
from .models import CachedRestaurant, ExtractDishesRequest, ExtractionResult, TopDish
from .prompts import EXTRACT_DISHES_PROMPT, build_extraction_prompt

logger = logging.getLogger(__name__)


def parse_top_dishes(raw: str) -> list[TopDish]:
    """Parse the LLM reply into dishes ordered by mention count, highest first."""
    try:
        dishes = [TopDish.model_validate(item) for item in parse_json_list(raw)]
    except ValidationError as exc:
        raise LLMResponseError(f"LLM returned malformed dishes: {exc}") from exc
    return sorted(dishes, key=lambda d: d.mentions, reverse=True)


def _finish(started_at: float, request: ExtractDishesRequest, result: ExtractionResult) -> ExtractionResult:
    record_lookup(
        "extract_dishes",
        started_at,
        place_id=request.place_id,
        source=result.source,
        cache_hit=result.from_cache,
        limit_reached=result.limit_reached,
        dishes_returned=len(result.top_dishes),
    )
    return result


async def extract_dishes(
    request: ExtractDishesRequest,
    db: Database,
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
    limits: UsageLimits = DEFAULT_USAGE_LIMITS,
    config: DishesConfig = DEFAULT_DISHES_CONFIG,
) -> ExtractionResult:
    """
    Rank a restaurant's most recommended dishes from its reviews.

    Steps:
    - Serve a fresh cached dish list for the place id without spending quota.
    - Return a ``limit_reached`` result when the daily LLM quota is spent.
    - Otherwise call the LLM on at most ``review_limit`` reviews and cache
      the parsed dishes under the place id.

    ``LLMError`` propagates when the call fails or the reply cannot be
    parsed; nothing is cached in that case.
    """
    started_at = time.time()

    if not request.reviews:
        return _finish(started_at, request, ExtractionResult(
            error="No reviews to analyze", source=request.source,
        ))

    cache = RestaurantCacheRepository(db)
    if request.place_id:
        cached = await cache.get(request.place_id)
        if cached is not None and cached.is_fresh() and cached.top_dishes:
            logger.info("Dish cache hit for %s", request.place_id)
            return _finish(started_at, request, ExtractionResult(
                top_dishes=cached.top_dishes, from_cache=True, source=request.source,
            ))

    if not await can_call(Provider.llm, db, limits):
        return _finish(started_at, request, ExtractionResult(
            error=LIMIT_REACHED_MESSAGE, limit_reached=True, source=request.source,
        ))

    await increment(Provider.llm, db)

    reviews = request.reviews[: config.review_limit]
    raw = await chat_completion(
        EXTRACT_DISHES_PROMPT,
        build_extraction_prompt(request.name, request.address, reviews),
        config=llm_config,
    )
    top_dishes = parse_top_dishes(raw)

    if request.place_id:
        await cache.upsert(CachedRestaurant(
            place_id=request.place_id,
            name=request.name,
            address=request.address,
            lat=request.lat or 0.0,
            lng=request.lng or 0.0,
            top_dishes=top_dishes,
            reviews=reviews,
            image_url=request.image_url,
        ))

    return _finish(started_at, request, ExtractionResult(
        top_dishes=top_dishes, from_cache=False, source=request.source or "unknown",
    ))
