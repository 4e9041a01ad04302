from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ProviderConfig:
    yelp_api_key: str = os.getenv("YELP_API_KEY", "")
    google_places_key: str = os.getenv("GOOGLE_PLACES_KEY", "")
    geoapify_key: str = os.getenv("GEOAPIFY_KEY", "")
    yelp_base_url: str = "https://api.yelp.com/v3"
    google_base_url: str = "https://maps.googleapis.com/maps/api/place"
    geoapify_places_url: str = "https://api.geoapify.com/v2/places"
    geoapify_geocode_url: str = "https://api.geoapify.com/v1/geocode/search"
    review_limit: int = 20
    photo_max_width: int = 400
    geo_radius_m: int = 5000
    geo_result_limit: int = 5
    timeout: float = float(os.getenv("HTTP_TIMEOUT", "10"))


DEFAULT_PROVIDER_CONFIG = ProviderConfig()
