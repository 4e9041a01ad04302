"""
Offline script to pre-populate the English dish catalog.

Usage:
    python -m menu_decoder.dishes.pregenerate
"""
from __future__ import annotations

import asyncio
import logging

import httpx
from databases import Database

from ..images.config import DEFAULT_IMAGE_CONFIG, ImageConfig
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import LLMError
from ..storage.database import create_database, create_tables
from ..storage.repositories import GenericDishRepository
from .catalog import generate_cuisine_dishes
from .config import DEFAULT_DISHES_CONFIG, DishesConfig

logger = logging.getLogger(__name__)

CUISINES = [
    "Japanese",
    "Chinese",
    "Korean",
    "Thai",
    "Vietnamese",
    "Indian",
    "Mexican",
    "Italian",
    "French",
    "Spanish / Tapas",
    "Greek",
    "Turkish",
    "Lebanese / Middle Eastern",
    "Moroccan",
    "Ethiopian",
    "Peruvian",
    "Brazilian",
    "American BBQ",
    "German",
    "Malaysian",
]


async def pregenerate(
    db: Database,
    cuisines: list[str] = CUISINES,
    client: httpx.AsyncClient | None = None,
    config: DishesConfig = DEFAULT_DISHES_CONFIG,
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
    image_config: ImageConfig = DEFAULT_IMAGE_CONFIG,
) -> dict[str, int]:
    """
    Generate catalogs for cuisines that are not yet populated.

    Returns the number of dishes saved per generated cuisine. A cuisine with
    at least ``populated_threshold`` rows is skipped; an LLM failure on one
    cuisine is logged and the run moves on. The daily LLM quota is not
    consulted.
    """
    repo = GenericDishRepository(db)
    language_code = config.pregenerate_language_code
    saved: dict[str, int] = {}

    for cuisine in cuisines:
        existing = await repo.count(cuisine, language_code)
        if existing >= config.populated_threshold:
            logger.info("[SKIP] %s: already has %d dishes cached", cuisine, existing)
            continue

        logger.info("[GENERATING] %s", cuisine)
        try:
            dishes = await generate_cuisine_dishes(
                cuisine,
                config.pregenerate_language,
                language_code,
                db=db,
                client=client,
                dish_count=config.pregenerate_dish_count,
                llm_config=llm_config,
                image_config=image_config,
            )
        except LLMError:
            logger.exception("[ERROR] %s", cuisine)
            continue

        saved[cuisine] = len(dishes)
        logger.info("[DONE] %s: saved %d dishes", cuisine, len(dishes))

        # Pace successive LLM calls
        await asyncio.sleep(config.pregenerate_delay)

    return saved


async def run_pregenerate() -> None:
    db = create_database()
    await db.connect()
    try:
        await create_tables(db)
        async with httpx.AsyncClient(timeout=DEFAULT_IMAGE_CONFIG.timeout) as client:
            saved = await pregenerate(db, client=client)
    finally:
        await db.disconnect()
    logger.info("Pre-generation complete: %d cuisines generated", len(saved))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    asyncio.run(run_pregenerate())
