from __future__ import annotations

import logging

import httpx

from ..usage.config import Provider
from .base import PROVIDER_ERRORS, ProviderAdapter, json_body
from .models import CandidateRestaurant, RestaurantQuery

logger = logging.getLogger(__name__)


class GooglePlacesAdapter(ProviderAdapter):
    """Tier 2: Google Places find-place-from-text, then place details for reviews."""

    source = "google"
    quota = Provider.google

    def photo_url(self, photo_reference: str) -> str:
        url = httpx.URL(
            f"{self.config.google_base_url}/photo",
            params={
                "maxwidth": self.config.photo_max_width,
                "photo_reference": photo_reference,
                "key": self.config.google_places_key,
            },
        )
        return str(url)

    async def search(
        self,
        query: RestaurantQuery,
        client: httpx.AsyncClient,
    ) -> CandidateRestaurant | None:
        key = self.config.google_places_key
        if not key:
            return None

        try:
            find_resp = await client.get(
                f"{self.config.google_base_url}/findplacefromtext/json",
                params={
                    "input": f"{query.name} {query.location}",
                    "inputtype": "textquery",
                    "fields": "place_id,name,formatted_address,geometry,photos,rating",
                    "key": key,
                },
            )
            if not find_resp.is_success:
                logger.info("Google find-place returned %s for %r", find_resp.status_code, query.text)
                return None
            candidates = json_body(find_resp).get("candidates") or []
            if not candidates:
                return None
            place = candidates[0]
            google_id = place["place_id"]

            detail_resp = await client.get(
                f"{self.config.google_base_url}/details/json",
                params={"place_id": google_id, "fields": "reviews", "key": key},
            )
            detail = json_body(detail_resp).get("result") or {} if detail_resp.is_success else {}
            return self._to_candidate(place, detail, query)
        except PROVIDER_ERRORS:
            logger.warning("Google Places lookup failed for %r", query.text, exc_info=True)
            return None

    def _to_candidate(
        self,
        place: dict,
        detail: dict,
        query: RestaurantQuery,
    ) -> CandidateRestaurant:
        photos = place.get("photos") or []
        reference = photos[0].get("photo_reference") if photos else None
        location = (place.get("geometry") or {}).get("location") or {}
        return CandidateRestaurant(
            place_id=f"google_{place['place_id']}",
            name=place.get("name") or query.name,
            address=place.get("formatted_address") or "",
            lat=location.get("lat") or 0.0,
            lng=location.get("lng") or 0.0,
            image_url=self.photo_url(reference) if reference else "",
            reviews=[r["text"] for r in detail.get("reviews") or [] if r.get("text")],
            source=self.source,
        )
