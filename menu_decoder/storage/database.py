from __future__ import annotations

from databases import Database

from .config import DEFAULT_STORAGE_CONFIG, StorageConfig

CREATE_DAILY_API_USAGE_TABLE = """
CREATE TABLE IF NOT EXISTS daily_api_usage (
    date VARCHAR(10) PRIMARY KEY,
    google_calls INTEGER NOT NULL DEFAULT 0,
    yelp_calls INTEGER NOT NULL DEFAULT 0,
    llm_calls INTEGER NOT NULL DEFAULT 0
)
"""

CREATE_RESTAURANT_CACHE_TABLE = """
CREATE TABLE IF NOT EXISTS restaurant_cache (
    place_id VARCHAR(255) PRIMARY KEY,
    name VARCHAR(255) NOT NULL DEFAULT '',
    address TEXT NOT NULL DEFAULT '',
    geo_lat REAL NOT NULL DEFAULT 0,
    geo_lng REAL NOT NULL DEFAULT 0,
    top_dishes_json TEXT NOT NULL DEFAULT '[]',
    reviews_json TEXT NOT NULL DEFAULT '[]',
    image_url TEXT NOT NULL DEFAULT '',
    last_updated REAL NOT NULL
)
"""

CREATE_GENERIC_DISHES_TABLE = """
CREATE TABLE IF NOT EXISTS generic_dishes (
    id INTEGER PRIMARY KEY,
    cuisine VARCHAR(128) NOT NULL,
    dish_name VARCHAR(255) NOT NULL,
    orig_lang VARCHAR(255) NOT NULL DEFAULT '',
    eng_lang VARCHAR(255) NOT NULL DEFAULT '',
    pref_lang VARCHAR(255) NOT NULL DEFAULT '',
    pref_lang_code VARCHAR(16) NOT NULL,
    ingredients TEXT NOT NULL DEFAULT '',
    taste TEXT NOT NULL DEFAULT '',
    eat_method TEXT NOT NULL DEFAULT '',
    sauces TEXT NOT NULL DEFAULT '',
    avg_price VARCHAR(128) NOT NULL DEFAULT '',
    image_url TEXT NOT NULL DEFAULT '',
    UNIQUE (cuisine, dish_name, pref_lang_code)
)
"""

SCHEMA = (
    CREATE_DAILY_API_USAGE_TABLE,
    CREATE_RESTAURANT_CACHE_TABLE,
    CREATE_GENERIC_DISHES_TABLE,
)


def create_database(config: StorageConfig = DEFAULT_STORAGE_CONFIG) -> Database:
    return Database(config.url)


async def create_tables(db: Database) -> None:
    for statement in SCHEMA:
        await db.execute(query=statement)
