from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

from ..dishes.models import CachedRestaurant, TopDish

Source = Literal["yelp", "google", "geoapify"]


@dataclass(frozen=True)
class RestaurantQuery:
    """A free-text restaurant search, split into location and name."""

    text: str
    name: str
    location: str
    lat: float | None = None
    lng: float | None = None

    @classmethod
    def from_text(
        cls,
        text: str,
        lat: float | None = None,
        lng: float | None = None,
    ) -> RestaurantQuery:
        # "Tokyo Sushi Dai" -> location "Tokyo", name "Sushi Dai".
        # Multi-word locations are misparsed; a single token is used for both.
        text = text.strip()
        parts = text.split(" ")
        if len(parts) > 1:
            location, name = parts[0], " ".join(parts[1:])
        else:
            location = name = text
        return cls(text=text, name=name, location=location, lat=lat, lng=lng)


class CandidateRestaurant(BaseModel):
    place_id: str
    name: str
    address: str = ""
    lat: float = 0.0
    lng: float = 0.0
    image_url: str = ""
    reviews: list[str] = Field(default_factory=list)
    source: Source

    @classmethod
    def from_cache(cls, entry: CachedRestaurant) -> CandidateRestaurant:
        return cls(
            place_id=entry.place_id,
            name=entry.name,
            address=entry.address,
            lat=entry.lat,
            lng=entry.lng,
            image_url=entry.image_url,
            reviews=entry.reviews,
            source=source_for_place_id(entry.place_id),
        )


def source_for_place_id(place_id: str) -> Source:
    if place_id.startswith("yelp_"):
        return "yelp"
    if place_id.startswith("google_"):
        return "google"
    return "geoapify"


class RestaurantLookupResult(BaseModel):
    restaurant: CandidateRestaurant | None = None
    top_dishes: list[TopDish] = Field(default_factory=list)
    from_cache: bool = False
    needs_extraction: bool = False
    limit_reached: bool = False
    error: str | None = None
