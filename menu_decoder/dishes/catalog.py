from __future__ import annotations

import logging
import time

import httpx
from databases import Database
from pydantic import ValidationError

from ..analytics.store import record_lookup
from ..images.config import DEFAULT_IMAGE_CONFIG, ImageConfig
from ..images.unsplash import search_image
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import chat_completion
from ..llm.parsing import LLMResponseError, parse_json_list
from ..storage.repositories import GenericDishRepository
from ..usage.config import DEFAULT_USAGE_LIMITS, LIMIT_REACHED_MESSAGE, Provider, UsageLimits
from ..usage.limiter import can_call, increment
from .config import DEFAULT_DISHES_CONFIG, DishesConfig
from .models import CuisineLookupResult, GeneratedDish, GenericDish
from .prompts import CUISINE_DISHES_PROMPT, build_cuisine_prompt

logger = logging.getLogger(__name__)


def parse_generated_dishes(raw: str) -> list[GeneratedDish]:
    try:
        return [GeneratedDish.model_validate(item) for item in parse_json_list(raw)]
    except ValidationError as exc:
        raise LLMResponseError(f"LLM returned malformed dishes: {exc}") from exc


async def generate_cuisine_dishes(
    cuisine: str,
    language: str,
    language_code: str,
    db: Database,
    client: httpx.AsyncClient | None = None,
    dish_count: str = DEFAULT_DISHES_CONFIG.catalog_dish_count,
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
    image_config: ImageConfig = DEFAULT_IMAGE_CONFIG,
) -> list[GenericDish]:
    """
    Ask the LLM for signature dishes and upsert them into the catalog.

    Does not consult the usage quota; callers gate it. Each dish gets a
    best-effort image. The native name keys the row, falling back to the
    English name; a dish with neither is skipped.
    """
    raw = await chat_completion(
        CUISINE_DISHES_PROMPT.format(count=dish_count),
        build_cuisine_prompt(cuisine, language),
        config=llm_config,
    )
    generated = parse_generated_dishes(raw)

    repo = GenericDishRepository(db)
    saved: dict[str, GenericDish] = {}
    for dish in generated:
        key = dish.key_name
        if not key:
            logger.warning("Skipping unnamed %s dish from LLM reply", cuisine)
            continue

        image_url = await search_image(f"{cuisine} {dish.eng_lang}", client, image_config)
        saved[key] = await repo.upsert(GenericDish(
            cuisine=cuisine,
            dish_name=key,
            orig_lang=dish.orig_lang,
            eng_lang=dish.eng_lang,
            pref_lang=dish.pref_lang or (dish.eng_lang if language_code == "en" else ""),
            pref_lang_code=language_code,
            ingredients=dish.ingredients,
            taste=dish.taste,
            eat_method=dish.eat_method,
            sauces=dish.sauces,
            avg_price=dish.avg_price,
            image_url=image_url,
        ))

    return list(saved.values())


async def lookup_cuisine(
    cuisine: str,
    db: Database,
    language: str = "English",
    language_code: str = "en",
    client: httpx.AsyncClient | None = None,
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
    image_config: ImageConfig = DEFAULT_IMAGE_CONFIG,
    limits: UsageLimits = DEFAULT_USAGE_LIMITS,
    config: DishesConfig = DEFAULT_DISHES_CONFIG,
) -> CuisineLookupResult:
    """
    Return the localized signature dishes for a cuisine.

    Any stored rows for (cuisine, language_code) are a cache hit. Otherwise
    one LLM quota unit is spent to generate and store the catalog.
    ``LLMError`` propagates on call or parse failure.
    """
    started_at = time.time()

    cached = await GenericDishRepository(db).find(cuisine, language_code)
    if cached:
        logger.info("Cuisine cache hit for %s/%s (%d dishes)", cuisine, language_code, len(cached))
        result = CuisineLookupResult(dishes=cached, from_cache=True)
    elif not await can_call(Provider.llm, db, limits):
        result = CuisineLookupResult(error=LIMIT_REACHED_MESSAGE, limit_reached=True)
    else:
        await increment(Provider.llm, db)
        dishes = await generate_cuisine_dishes(
            cuisine,
            language,
            language_code,
            db=db,
            client=client,
            dish_count=config.catalog_dish_count,
            llm_config=llm_config,
            image_config=image_config,
        )
        result = CuisineLookupResult(dishes=dishes, from_cache=False)

    record_lookup(
        "cuisine_lookup",
        started_at,
        cuisine=cuisine,
        language_code=language_code,
        cache_hit=result.from_cache,
        limit_reached=result.limit_reached,
        dishes_returned=len(result.dishes),
    )
    return result
