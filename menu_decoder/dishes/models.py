from __future__ import annotations

import time
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

FRESHNESS_WINDOW_SECONDS = 30 * 24 * 60 * 60

_SENTIMENTS = ("positive", "mixed", "negative")


class TopDish(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: str = "N/A"
    mentions: int = Field(default=0, ge=0)
    sentiment: Literal["positive", "mixed", "negative"] = "mixed"

    @field_validator("description", mode="before")
    @classmethod
    def _description_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("price", mode="before")
    @classmethod
    def _price_text(cls, value: Any) -> str:
        if value is None or value == "":
            return "N/A"
        return str(value)

    @field_validator("sentiment", mode="before")
    @classmethod
    def _normalise_sentiment(cls, value: Any) -> str:
        text = str(value or "").strip().lower()
        return text if text in _SENTIMENTS else "mixed"


class GeneratedDish(BaseModel):
    """One signature dish as returned by the LLM (camelCase keys)."""

    model_config = ConfigDict(populate_by_name=True)

    dish_name: str = Field(default="", alias="dishName")
    orig_lang: str = Field(default="", alias="origLang")
    eng_lang: str = Field(default="", alias="engLang")
    pref_lang: str = Field(default="", alias="prefLang")
    ingredients: str = ""
    taste: str = ""
    eat_method: str = Field(default="", alias="eatMethod")
    sauces: str = ""
    avg_price: str = Field(default="", alias="avgPrice")

    @field_validator("*", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, list):
            return ", ".join(str(v) for v in value)
        return value if isinstance(value, str) else str(value)

    @property
    def key_name(self) -> str:
        """Native name, falling back to the English name."""
        return self.dish_name.strip() or self.eng_lang.strip()


class GenericDish(BaseModel):
    id: int | None = None
    cuisine: str
    dish_name: str
    orig_lang: str = ""
    eng_lang: str = ""
    pref_lang: str = ""
    pref_lang_code: str = "en"
    ingredients: str = ""
    taste: str = ""
    eat_method: str = ""
    sauces: str = ""
    avg_price: str = ""
    image_url: str = ""


class CachedRestaurant(BaseModel):
    place_id: str
    name: str = ""
    address: str = ""
    lat: float = 0.0
    lng: float = 0.0
    top_dishes: list[TopDish] = Field(default_factory=list)
    reviews: list[str] = Field(default_factory=list)
    image_url: str = ""
    last_updated: float = Field(default_factory=time.time)

    def is_fresh(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return now - self.last_updated < FRESHNESS_WINDOW_SECONDS


# ── API shapes ───────────────────────────────────────────────────────────


class ExtractDishesRequest(BaseModel):
    place_id: str | None = None
    name: str = ""
    address: str = ""
    lat: float | None = None
    lng: float | None = None
    image_url: str = ""
    reviews: list[str] = Field(default_factory=list)
    source: str | None = None


class ExtractionResult(BaseModel):
    top_dishes: list[TopDish] = Field(default_factory=list)
    from_cache: bool = False
    limit_reached: bool = False
    source: str | None = None
    error: str | None = None


class CuisineLookupResult(BaseModel):
    dishes: list[GenericDish] = Field(default_factory=list)
    from_cache: bool = False
    limit_reached: bool = False
    error: str | None = None
