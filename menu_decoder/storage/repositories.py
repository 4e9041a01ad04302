from __future__ import annotations

import json
from typing import Any

from databases import Database
from databases.interfaces import Record

from ..dishes.models import CachedRestaurant, GenericDish, TopDish

USAGE_COLUMNS = ("google_calls", "yelp_calls", "llm_calls")


# ── Daily usage ──────────────────────────────────────────────────────────

GET_USAGE = "SELECT * FROM daily_api_usage WHERE date = :date"

CREATE_USAGE = """
INSERT INTO daily_api_usage (date) VALUES (:date)
ON CONFLICT (date) DO NOTHING
"""

INCREMENT_USAGE = """
INSERT INTO daily_api_usage (date, {column}) VALUES (:date, 1)
ON CONFLICT (date) DO UPDATE SET {column} = {column} + 1
"""


class UsageRepository:
    """Per-day provider call counters, one row per UTC date."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def get_or_create(self, date: str) -> dict[str, int]:
        row = await self.db.fetch_one(GET_USAGE, values={"date": date})
        if row is None:
            await self.db.execute(CREATE_USAGE, values={"date": date})
            row = await self.db.fetch_one(GET_USAGE, values={"date": date})
        return {column: int(row[column]) for column in USAGE_COLUMNS}

    async def increment(self, date: str, column: str) -> None:
        if column not in USAGE_COLUMNS:
            raise ValueError(f"Unknown usage column: {column}")
        await self.db.execute(
            INCREMENT_USAGE.format(column=column), values={"date": date}
        )


# ── Restaurant cache ─────────────────────────────────────────────────────

GET_RESTAURANT = "SELECT * FROM restaurant_cache WHERE place_id = :place_id"

SEARCH_RESTAURANTS = """
SELECT * FROM restaurant_cache
WHERE LOWER(name) LIKE :pattern ESCAPE '\\'
ORDER BY last_updated DESC
LIMIT :limit
"""

UPSERT_RESTAURANT = """
INSERT INTO restaurant_cache (
    place_id, name, address, geo_lat, geo_lng,
    top_dishes_json, reviews_json, image_url, last_updated
) VALUES (
    :place_id, :name, :address, :geo_lat, :geo_lng,
    :top_dishes_json, :reviews_json, :image_url, :last_updated
)
ON CONFLICT (place_id) DO UPDATE SET
    top_dishes_json = excluded.top_dishes_json,
    reviews_json = excluded.reviews_json,
    last_updated = excluded.last_updated
"""


def _like_pattern(text: str) -> str:
    escaped = (
        text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return f"%{escaped}%"


def _restaurant_from_row(row: Record) -> CachedRestaurant:
    return CachedRestaurant(
        place_id=row["place_id"],
        name=row["name"],
        address=row["address"],
        lat=row["geo_lat"],
        lng=row["geo_lng"],
        top_dishes=[TopDish(**d) for d in json.loads(row["top_dishes_json"])],
        reviews=json.loads(row["reviews_json"]),
        image_url=row["image_url"],
        last_updated=row["last_updated"],
    )


class RestaurantCacheRepository:
    """Extracted top dishes keyed by provider-prefixed place id.

    Rows are never deleted; freshness is decided by the caller.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    async def get(self, place_id: str) -> CachedRestaurant | None:
        row = await self.db.fetch_one(GET_RESTAURANT, values={"place_id": place_id})
        return _restaurant_from_row(row) if row is not None else None

    async def search_by_name(self, text: str, limit: int = 5) -> list[CachedRestaurant]:
        """Case-insensitive substring match on the restaurant name."""
        rows = await self.db.fetch_all(
            SEARCH_RESTAURANTS,
            values={"pattern": _like_pattern(text), "limit": limit},
        )
        return [_restaurant_from_row(r) for r in rows]

    async def upsert(self, entry: CachedRestaurant) -> None:
        """Insert a new place, or refresh dishes and reviews of an existing one.

        Name, address, coordinates and image are set only on insert.
        """
        await self.db.execute(
            UPSERT_RESTAURANT,
            values={
                "place_id": entry.place_id,
                "name": entry.name,
                "address": entry.address,
                "geo_lat": entry.lat,
                "geo_lng": entry.lng,
                "top_dishes_json": json.dumps(
                    [d.model_dump() for d in entry.top_dishes]
                ),
                "reviews_json": json.dumps(entry.reviews),
                "image_url": entry.image_url,
                "last_updated": entry.last_updated,
            },
        )


# ── Generic dish catalog ─────────────────────────────────────────────────

FIND_DISHES = """
SELECT * FROM generic_dishes
WHERE cuisine = :cuisine AND pref_lang_code = :pref_lang_code
ORDER BY id
"""

COUNT_DISHES = """
SELECT COUNT(*) AS total FROM generic_dishes
WHERE cuisine = :cuisine AND pref_lang_code = :pref_lang_code
"""

GET_DISH = """
SELECT * FROM generic_dishes
WHERE cuisine = :cuisine AND dish_name = :dish_name AND pref_lang_code = :pref_lang_code
"""

UPSERT_DISH = """
INSERT INTO generic_dishes (
    cuisine, dish_name, orig_lang, eng_lang, pref_lang, pref_lang_code,
    ingredients, taste, eat_method, sauces, avg_price, image_url
) VALUES (
    :cuisine, :dish_name, :orig_lang, :eng_lang, :pref_lang, :pref_lang_code,
    :ingredients, :taste, :eat_method, :sauces, :avg_price, :image_url
)
ON CONFLICT (cuisine, dish_name, pref_lang_code) DO UPDATE SET
    orig_lang = excluded.orig_lang,
    eng_lang = excluded.eng_lang,
    pref_lang = excluded.pref_lang,
    ingredients = excluded.ingredients,
    taste = excluded.taste,
    eat_method = excluded.eat_method,
    sauces = excluded.sauces,
    avg_price = excluded.avg_price,
    image_url = excluded.image_url
"""


def _dish_from_row(row: Record) -> GenericDish:
    values: dict[str, Any] = {field: row[field] for field in GenericDish.model_fields}
    return GenericDish(**values)


class GenericDishRepository:
    """Signature dishes per cuisine, unique on (cuisine, dish_name, pref_lang_code)."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def find(self, cuisine: str, pref_lang_code: str) -> list[GenericDish]:
        rows = await self.db.fetch_all(
            FIND_DISHES,
            values={"cuisine": cuisine, "pref_lang_code": pref_lang_code},
        )
        return [_dish_from_row(r) for r in rows]

    async def count(self, cuisine: str, pref_lang_code: str) -> int:
        row = await self.db.fetch_one(
            COUNT_DISHES,
            values={"cuisine": cuisine, "pref_lang_code": pref_lang_code},
        )
        return int(row["total"]) if row is not None else 0

    async def upsert(self, dish: GenericDish) -> GenericDish:
        values = dish.model_dump(exclude={"id"})
        await self.db.execute(UPSERT_DISH, values=values)
        row = await self.db.fetch_one(
            GET_DISH,
            values={
                "cuisine": dish.cuisine,
                "dish_name": dish.dish_name,
                "pref_lang_code": dish.pref_lang_code,
            },
        )
        return _dish_from_row(row)
