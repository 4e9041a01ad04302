from __future__ import annotations

import logging
import time

import httpx

from .base import PROVIDER_ERRORS, ProviderAdapter, json_body
from .models import CandidateRestaurant, RestaurantQuery

logger = logging.getLogger(__name__)


class GeoapifyAdapter(ProviderAdapter):
    """
    Tier 3: location-only fallback.

    Unmetered and never carries reviews, so dish extraction is skipped for
    its results.
    """

    source = "geoapify"
    quota = None
    requires_reviews = False

    def _request(self, query: RestaurantQuery) -> tuple[str, dict[str, str | int]]:
        if query.lat is None or query.lng is None:
            return self.config.geoapify_geocode_url, {
                "text": query.text,
                "type": "amenity",
                "filter": "countrycode:auto",
                "limit": self.config.geo_result_limit,
                "apiKey": self.config.geoapify_key,
            }
        return self.config.geoapify_places_url, {
            "categories": "catering.restaurant",
            "filter": f"circle:{query.lng},{query.lat},{self.config.geo_radius_m}",
            "limit": self.config.geo_result_limit,
            "apiKey": self.config.geoapify_key,
        }

    async def search(
        self,
        query: RestaurantQuery,
        client: httpx.AsyncClient,
    ) -> CandidateRestaurant | None:
        if not self.config.geoapify_key:
            return None

        url, params = self._request(query)
        try:
            resp = await client.get(url, params=params)
            if not resp.is_success:
                logger.info("Geoapify returned %s for %r", resp.status_code, query.text)
                return None
            features = json_body(resp).get("features") or []
            if not features:
                return None
            return self._to_candidate(features[0].get("properties") or {}, query)
        except PROVIDER_ERRORS:
            logger.warning("Geoapify lookup failed for %r", query.text, exc_info=True)
            return None

    def _to_candidate(self, props: dict, query: RestaurantQuery) -> CandidateRestaurant:
        return CandidateRestaurant(
            place_id=props.get("place_id") or f"geo_{int(time.time() * 1000)}",
            name=props.get("name") or query.text,
            address=props.get("formatted") or "",
            lat=props.get("lat") or 0.0,
            lng=props.get("lon") or 0.0,
            reviews=[],
            source=self.source,
        )
