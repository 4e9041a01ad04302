from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

from ..usage.config import Provider
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from .models import CandidateRestaurant, RestaurantQuery, Source


class ProviderAdapter(ABC):
    """
    One restaurant provider tier.

    ``search`` returns ``None`` for no match, a missing credential, or any
    network/HTTP failure; it never raises for provider errors.
    """

    source: ClassVar[Source]
    quota: ClassVar[Provider | None] = None
    requires_reviews: ClassVar[bool] = True

    def __init__(self, config: ProviderConfig = DEFAULT_PROVIDER_CONFIG) -> None:
        self.config = config

    @abstractmethod
    async def search(
        self,
        query: RestaurantQuery,
        client: httpx.AsyncClient,
    ) -> CandidateRestaurant | None:
        ...

    def accepts(self, result: CandidateRestaurant | None) -> bool:
        """Review tiers only count when they produced at least one review."""
        if result is None:
            return False
        return bool(result.reviews) or not self.requires_reviews


# Network failures plus malformed payloads from any provider
PROVIDER_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError)


def json_body(resp: httpx.Response) -> dict[str, Any]:
    data = resp.json()
    return data if isinstance(data, dict) else {}
