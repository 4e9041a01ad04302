from __future__ import annotations

import json

import httpx
import pytest

from menu_decoder.dishes.catalog import lookup_cuisine
from menu_decoder.images.config import ImageConfig
from menu_decoder.images.unsplash import search_image

CONFIG = ImageConfig(unsplash_key="unsplash-key")


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_returns_first_regular_url():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"results": [
            {"urls": {"regular": "https://images.unsplash.com/ramen"}},
            {"urls": {"regular": "https://images.unsplash.com/other"}},
        ]})

    async with _client(handler) as client:
        url = await search_image("Japanese Ramen", client, CONFIG)

    assert url == "https://images.unsplash.com/ramen"
    assert seen[0].url.params["query"] == "Japanese Ramen food dish"
    assert seen[0].url.params["per_page"] == "1"
    assert seen[0].headers["Authorization"] == "Client-ID unsplash-key"


@pytest.mark.asyncio
async def test_no_key_returns_empty_without_request():
    def handler(request):
        raise AssertionError("unexpected request")

    async with _client(handler) as client:
        assert await search_image("Ramen", client, ImageConfig(unsplash_key="")) == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(403, json={"errors": ["Rate Limit Exceeded"]}),
    httpx.Response(200, json={"results": []}),
    httpx.Response(200, text="<html>not json</html>"),
])
async def test_failures_return_empty(response):
    async with _client(lambda request: response) as client:
        assert await search_image("Ramen", client, CONFIG) == ""


@pytest.mark.asyncio
async def test_network_error_returns_empty():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    async with _client(handler) as client:
        assert await search_image("Ramen", client, CONFIG) == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"results": [{"urls": "not-a-dict"}]},
    {"results": ["x"]},
    {"results": {"0": 1}},
    {"results": [{"urls": {"regular": 42}}]},
    ["not", "an", "object"],
])
async def test_unexpected_result_shapes_return_empty(body):
    async with _client(lambda request: httpx.Response(200, json=body)) as client:
        assert await search_image("Ramen", client, CONFIG) == ""


@pytest.mark.asyncio
async def test_malformed_image_reply_does_not_abort_catalog(db, llm_config, limits, llm_reply):
    llm_reply(json.dumps([{"dishName": "Pho", "engLang": "Pho"}]))
    client = _client(lambda request: httpx.Response(200, json={"results": [{"urls": "broken"}]}))

    async with client:
        result = await lookup_cuisine(
            "Vietnamese", db, client=client, llm_config=llm_config, image_config=CONFIG, limits=limits,
        )

    assert [d.dish_name for d in result.dishes] == ["Pho"]
    assert result.dishes[0].image_url == ""
