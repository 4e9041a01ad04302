from __future__ import annotations

import logging

import httpx

from ..usage.config import Provider
from .base import PROVIDER_ERRORS, ProviderAdapter, json_body
from .models import CandidateRestaurant, RestaurantQuery

logger = logging.getLogger(__name__)


class YelpAdapter(ProviderAdapter):
    """Tier 1: Yelp Fusion business search plus relevance-sorted reviews."""

    source = "yelp"
    quota = Provider.yelp

    async def search(
        self,
        query: RestaurantQuery,
        client: httpx.AsyncClient,
    ) -> CandidateRestaurant | None:
        key = self.config.yelp_api_key
        if not key:
            return None

        headers = {"Authorization": f"Bearer {key}"}
        try:
            resp = await client.get(
                f"{self.config.yelp_base_url}/businesses/search",
                params={
                    "term": query.name,
                    "location": query.location,
                    "limit": 1,
                    "categories": "restaurants",
                },
                headers=headers,
            )
            if not resp.is_success:
                logger.info("Yelp search returned %s for %r", resp.status_code, query.text)
                return None
            businesses = json_body(resp).get("businesses") or []
            if not businesses:
                return None
            biz = businesses[0]
            biz_id = biz["id"]

            review_resp = await client.get(
                f"{self.config.yelp_base_url}/businesses/{biz_id}/reviews",
                params={"limit": self.config.review_limit, "sort_by": "relevance"},
                headers=headers,
            )
            raw_reviews = (
                json_body(review_resp).get("reviews") or [] if review_resp.is_success else []
            )
            return self._to_candidate(biz, raw_reviews, query)
        except PROVIDER_ERRORS:
            logger.warning("Yelp lookup failed for %r", query.text, exc_info=True)
            return None

    def _to_candidate(
        self,
        biz: dict,
        raw_reviews: list,
        query: RestaurantQuery,
    ) -> CandidateRestaurant:
        location = biz.get("location") or {}
        coordinates = biz.get("coordinates") or {}
        return CandidateRestaurant(
            place_id=f"yelp_{biz['id']}",
            name=biz.get("name") or query.name,
            address=", ".join(location.get("display_address") or []),
            lat=coordinates.get("latitude") or 0.0,
            lng=coordinates.get("longitude") or 0.0,
            image_url=biz.get("image_url") or "",
            reviews=[r["text"] for r in raw_reviews if r.get("text")],
            source=self.source,
        )
