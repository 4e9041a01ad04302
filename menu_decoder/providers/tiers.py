from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx
from databases import Database

from ..usage.config import DEFAULT_USAGE_LIMITS, UsageLimits
from ..usage.limiter import can_call, increment
from .base import ProviderAdapter
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from .geoapify import GeoapifyAdapter
from .google_places import GooglePlacesAdapter
from .models import CandidateRestaurant, RestaurantQuery
from .yelp import YelpAdapter

logger = logging.getLogger(__name__)


def default_tiers(config: ProviderConfig = DEFAULT_PROVIDER_CONFIG) -> list[ProviderAdapter]:
    """Yelp, then Google Places, then Geoapify. The order is fixed."""
    return [YelpAdapter(config), GooglePlacesAdapter(config), GeoapifyAdapter(config)]


async def find_restaurant(
    query: RestaurantQuery,
    db: Database,
    client: httpx.AsyncClient,
    tiers: Sequence[ProviderAdapter] | None = None,
    limits: UsageLimits = DEFAULT_USAGE_LIMITS,
) -> CandidateRestaurant | None:
    """
    Walk the provider tiers and return the first accepted result.

    A metered tier is skipped without spending quota when its daily cap is
    reached; otherwise one unit is spent before the call. Review tiers are
    accepted only with at least one review and are skipped when the query has
    no restaurant name.
    """
    for adapter in tiers if tiers is not None else default_tiers():
        if adapter.requires_reviews and not query.name:
            continue

        if adapter.quota is not None:
            if not await can_call(adapter.quota, db, limits):
                logger.info("Skipping %s tier: daily quota reached", adapter.source)
                continue
            await increment(adapter.quota, db)

        result = await adapter.search(query, client)
        if adapter.accepts(result):
            logger.info("Restaurant %r resolved by %s tier", query.text, adapter.source)
            return result
        logger.info("%s tier gave no usable result for %r", adapter.source, query.text)

    return None
