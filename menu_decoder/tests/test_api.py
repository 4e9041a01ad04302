from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from menu_decoder.app import ServiceConfig, create_app
from menu_decoder.images.config import ImageConfig
from menu_decoder.llm.config import LLMConfig
from menu_decoder.providers.config import ProviderConfig
from menu_decoder.usage.config import UsageLimits

PROVIDERS = ProviderConfig(yelp_api_key="yelp-key", google_places_key="google-key", geoapify_key="geo-key")

DISHES_REPLY = json.dumps([
    {"name": "Omakase", "description": "Chef's selection", "price": "$60", "mentions": 6, "sentiment": "positive"},
    {"name": "Tamago", "description": "Sweet omelette", "price": "$4", "mentions": 2, "sentiment": "mixed"},
])

CUISINE_REPLY = json.dumps([
    {"dishName": "Pad Thai", "engLang": "Pad Thai", "taste": "Sweet and sour"},
    {"dishName": "Tom Yum", "engLang": "Tom Yum", "taste": "Spicy"},
])


def provider_handler(request: httpx.Request) -> httpx.Response:
    host = request.url.host
    if host == "api.yelp.com":
        if request.url.path.endswith("/businesses/search"):
            return httpx.Response(200, json={"businesses": [{
                "id": "sushi-dai",
                "name": "Sushi Dai",
                "image_url": "https://yelp.example/sushi.jpg",
                "location": {"display_address": ["Tsukiji", "Tokyo"]},
                "coordinates": {"latitude": 35.66, "longitude": 139.77},
            }]})
        return httpx.Response(200, json={"reviews": [{"text": "Omakase is sublime"}, {"text": "Try the tamago"}]})
    if host == "api.geoapify.com":
        return httpx.Response(200, json={"features": [{"properties": {
            "place_id": "geo-1", "name": "Corner Bistro", "formatted": "1 Main St", "lat": 40.7, "lon": -74.0,
        }}]})
    return httpx.Response(404)


@pytest.fixture
def service_config(storage_config, llm_config) -> ServiceConfig:
    return ServiceConfig(
        storage=storage_config,
        llm=llm_config,
        providers=PROVIDERS,
        images=ImageConfig(unsplash_key=""),
        limits=UsageLimits(google=50, yelp=450, llm=200),
    )


@pytest.fixture
def client(service_config):
    app = create_app(service_config, transport=httpx.MockTransport(provider_handler))
    with TestClient(app) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


# ── Cuisine ──────────────────────────────────────────────────────────────


def test_cuisine_requires_parameter(client):
    assert client.get("/api/cuisine").status_code == 400


def test_cuisine_generates_then_serves_cache(client, llm_reply):
    create = llm_reply(CUISINE_REPLY)

    first = client.get("/api/cuisine", params={"cuisine": "Thai"})
    second = client.get("/api/cuisine", params={"cuisine": "Thai"})

    assert first.status_code == 200
    assert first.json()["from_cache"] is False
    assert [d["dish_name"] for d in first.json()["dishes"]] == ["Pad Thai", "Tom Yum"]
    assert second.json()["from_cache"] is True
    assert create.await_count == 1
    assert client.get("/api/usage").json()["llm"] == {"used": 1, "limit": 200}


def test_cuisine_language_parameters(client, llm_reply):
    llm_reply(CUISINE_REPLY)

    resp = client.get("/api/cuisine", params={"cuisine": "Thai", "lang": "French", "langCode": "fr"})

    assert {d["pref_lang_code"] for d in resp.json()["dishes"]} == {"fr"}


def test_cuisine_llm_failure_is_server_error(client, llm_reply):
    llm_reply("not json")

    resp = client.get("/api/cuisine", params={"cuisine": "Thai"})

    assert resp.status_code == 500
    assert resp.json()["dishes"] == []
    assert resp.json()["error"]


def test_cuisine_without_llm_key_is_server_error(service_config):
    config = ServiceConfig(storage=service_config.storage, llm=LLMConfig(api_key=""), limits=service_config.limits)
    with TestClient(create_app(config)) as c:
        assert c.get("/api/cuisine", params={"cuisine": "Thai"}).status_code == 500


# ── Restaurant search ────────────────────────────────────────────────────


def test_search_requires_query_or_location(client):
    assert client.get("/api/search-restaurant").status_code == 400
    assert client.get("/api/search-restaurant", params={"q": "  "}).status_code == 400


def test_search_finds_yelp_restaurant(client):
    resp = client.get("/api/search-restaurant", params={"q": "Tokyo Sushi Dai"})

    body = resp.json()
    assert resp.status_code == 200
    assert body["restaurant"]["place_id"] == "yelp_sushi-dai"
    assert body["restaurant"]["source"] == "yelp"
    assert body["needs_extraction"] is True
    assert body["top_dishes"] == []
    assert client.get("/api/usage").json()["yelp"]["used"] == 1


def test_search_with_extract_returns_dishes(client, llm_reply):
    llm_reply(DISHES_REPLY)

    body = client.get("/api/search-restaurant", params={"q": "Tokyo Sushi Dai", "extract": "true"}).json()

    assert [d["name"] for d in body["top_dishes"]] == ["Omakase", "Tamago"]
    assert body["needs_extraction"] is False


def test_search_by_location_uses_geoapify(client):
    body = client.get("/api/search-restaurant", params={"lat": 40.7, "lng": -74.0}).json()

    assert body["restaurant"]["source"] == "geoapify"
    assert body["needs_extraction"] is False
    assert client.get("/api/usage").json()["yelp"]["used"] == 0


def test_search_serves_fresh_cache_without_providers(service_config, llm_reply):
    llm_reply(DISHES_REPLY)

    def handler(request):
        raise AssertionError("providers must not be called")

    with TestClient(create_app(service_config, transport=httpx.MockTransport(handler))) as c:
        c.post("/api/extract-dishes", json={
            "place_id": "google_xyz", "name": "Ichiran Ramen", "reviews": ["Rich tonkotsu"],
        })
        body = c.get("/api/search-restaurant", params={"q": "ichiran"}).json()

    assert body["from_cache"] is True
    assert body["restaurant"]["source"] == "google"
    assert body["top_dishes"][0]["name"] == "Omakase"


# ── Dish extraction ──────────────────────────────────────────────────────


def test_extract_dishes_endpoint(client, llm_reply):
    llm_reply(DISHES_REPLY)
    payload = {"place_id": "yelp_sushi-dai", "name": "Sushi Dai", "reviews": ["Omakase!"], "source": "yelp"}

    first = client.post("/api/extract-dishes", json=payload).json()
    second = client.post("/api/extract-dishes", json=payload).json()

    assert first["from_cache"] is False
    assert first["top_dishes"][0]["name"] == "Omakase"
    assert second["from_cache"] is True


def test_extract_dishes_without_reviews(client):
    body = client.post("/api/extract-dishes", json={"name": "Empty Place", "reviews": []}).json()

    assert body["error"] == "No reviews to analyze"
    assert body["top_dishes"] == []


def test_extract_dishes_bad_reply_is_server_error(client, llm_reply):
    llm_reply("I could not find any dishes.")

    resp = client.post("/api/extract-dishes", json={"place_id": "yelp_x", "name": "X", "reviews": ["ok"]})

    assert resp.status_code == 500
    assert resp.json()["top_dishes"] == []


def test_extract_dishes_limit_reached(service_config, llm_reply):
    create = llm_reply(DISHES_REPLY)
    config = ServiceConfig(
        storage=service_config.storage,
        llm=service_config.llm,
        limits=UsageLimits(google=50, yelp=450, llm=0),
    )

    with TestClient(create_app(config)) as c:
        body = c.post("/api/extract-dishes", json={"name": "X", "reviews": ["ok"]}).json()

    assert body["limit_reached"] is True
    create.assert_not_awaited()


# ── Usage and analytics ──────────────────────────────────────────────────


def test_usage_starts_at_zero(client):
    body = client.get("/api/usage").json()
    assert body["google"] == {"used": 0, "limit": 50}
    assert body["yelp"] == {"used": 0, "limit": 450}


def test_analytics_tracks_lookups(client, llm_reply):
    llm_reply(CUISINE_REPLY)
    client.get("/api/cuisine", params={"cuisine": "Thai"})
    client.get("/api/cuisine", params={"cuisine": "Thai"})
    client.get("/api/search-restaurant", params={"q": "Tokyo Sushi Dai"})

    body = client.get("/analytics").json()

    assert body["total_lookups"] == 3
    assert body["by_kind"]["cuisine_lookup"]["cache_hits"] == 1
    assert body["restaurant_sources"] == {"yelp": 1}
    assert body["top_cuisines"] == [{"name": "Thai", "count": 2}]


def test_search_image_used_when_provider_has_none(client):
    with patch("menu_decoder.providers.lookup.search_image", new=AsyncMock(return_value="https://unsplash/x")):
        body = client.get("/api/search-restaurant", params={"lat": 40.7, "lng": -74.0}).json()

    assert body["restaurant"]["image_url"] == "https://unsplash/x"
