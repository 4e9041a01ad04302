from __future__ import annotations

import logging

import httpx

from .config import DEFAULT_IMAGE_CONFIG, ImageConfig

logger = logging.getLogger(__name__)


async def search_image(
    query: str,
    client: httpx.AsyncClient | None = None,
    config: ImageConfig = DEFAULT_IMAGE_CONFIG,
) -> str:
    """
    Return the regular-size URL of the first Unsplash result for ``query``.

    Returns an empty string when no key is configured, the request fails, the
    response is not a success, or there are no results.
    """
    if not config.unsplash_key:
        return ""

    params = {
        "query": f"{query} {config.query_suffix}",
        "per_page": 1,
        "orientation": "squarish",
    }
    headers = {"Authorization": f"Client-ID {config.unsplash_key}"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.timeout) as own_client:
                resp = await own_client.get(config.search_url, params=params, headers=headers)
        else:
            resp = await client.get(config.search_url, params=params, headers=headers)
        if not resp.is_success:
            logger.info("Unsplash returned %s for %r", resp.status_code, query)
            return ""
        data = resp.json()
        results = data.get("results") if isinstance(data, dict) else None
    except (httpx.HTTPError, ValueError):
        logger.warning("Unsplash image lookup failed for %r", query, exc_info=True)
        return ""

    return _first_regular_url(results)


def _first_regular_url(results: object) -> str:
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        return ""
    urls = results[0].get("urls")
    if not isinstance(urls, dict):
        return ""
    regular = urls.get("regular")
    return regular if isinstance(regular, str) else ""
