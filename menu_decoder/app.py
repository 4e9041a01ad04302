from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from databases import Database
from fastapi import APIRouter, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .dishes.catalog import lookup_cuisine
from .dishes.config import DEFAULT_DISHES_CONFIG, DishesConfig
from .dishes.extraction import extract_dishes
from .dishes.models import CuisineLookupResult, ExtractDishesRequest, ExtractionResult
from .images.config import DEFAULT_IMAGE_CONFIG, ImageConfig
from .llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from .llm.groq_client import LLMError
from .providers.config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from .providers.lookup import lookup_restaurant
from .providers.models import RestaurantLookupResult
from .providers.tiers import default_tiers
from .storage.config import DEFAULT_STORAGE_CONFIG, StorageConfig
from .storage.database import create_database, create_tables
from .usage.config import DEFAULT_USAGE_LIMITS, UsageLimits
from .usage.limiter import get_usage_summary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceConfig:
    storage: StorageConfig = DEFAULT_STORAGE_CONFIG
    llm: LLMConfig = DEFAULT_LLM_CONFIG
    providers: ProviderConfig = DEFAULT_PROVIDER_CONFIG
    images: ImageConfig = DEFAULT_IMAGE_CONFIG
    limits: UsageLimits = DEFAULT_USAGE_LIMITS
    dishes: DishesConfig = DEFAULT_DISHES_CONFIG


router = APIRouter()


def _db(request: Request) -> Database:
    return request.app.state.db


def _http(request: Request) -> httpx.AsyncClient:
    return request.app.state.http


def _config(request: Request) -> ServiceConfig:
    return request.app.state.config


# ── Public endpoints ─────────────────────────────────────────────────────


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/api/cuisine", response_model=CuisineLookupResult)
async def cuisine(
    request: Request,
    cuisine: str | None = None,
    lang: str = "English",
    lang_code: str = Query(default="en", alias="langCode"),
):
    if not cuisine:
        raise HTTPException(status_code=400, detail="cuisine parameter is required")

    config = _config(request)
    try:
        return await lookup_cuisine(
            cuisine,
            _db(request),
            language=lang,
            language_code=lang_code,
            client=_http(request),
            llm_config=config.llm,
            image_config=config.images,
            limits=config.limits,
            config=config.dishes,
        )
    except LLMError:
        logger.exception("Cuisine lookup failed for %s", cuisine)
        body = CuisineLookupResult(error="Failed to fetch cuisine data")
        return JSONResponse(status_code=500, content=body.model_dump())


@router.get("/api/search-restaurant", response_model=RestaurantLookupResult)
async def search_restaurant(
    request: Request,
    q: str = "",
    lat: float | None = None,
    lng: float | None = None,
    extract: bool = False,
):
    if not q.strip() and lat is None:
        raise HTTPException(status_code=400, detail="Provide a search query or location")

    config = _config(request)
    try:
        return await lookup_restaurant(
            q,
            _db(request),
            _http(request),
            lat=lat,
            lng=lng,
            extract=extract,
            tiers=default_tiers(config.providers),
            llm_config=config.llm,
            image_config=config.images,
            limits=config.limits,
            dishes_config=config.dishes,
        )
    except LLMError:
        logger.exception("Restaurant lookup failed for %r", q)
        body = RestaurantLookupResult(error="Failed to extract dishes from reviews")
        return JSONResponse(status_code=500, content=body.model_dump())


@router.post("/api/extract-dishes", response_model=ExtractionResult)
async def extract(body: ExtractDishesRequest, request: Request):
    config = _config(request)
    try:
        return await extract_dishes(
            body,
            _db(request),
            llm_config=config.llm,
            limits=config.limits,
            config=config.dishes,
        )
    except LLMError:
        logger.exception("Dish extraction failed for %s", body.place_id or body.name)
        result = ExtractionResult(error="Failed to extract dishes from reviews")
        return JSONResponse(status_code=500, content=result.model_dump())


@router.get("/api/usage")
async def usage(request: Request) -> dict:
    return await get_usage_summary(_db(request), _config(request).limits)


@router.get("/analytics")
async def analytics() -> dict:
    return compute_analytics(get_events())


# ── Application factory ──────────────────────────────────────────────────


def create_app(
    config: ServiceConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    config = config or ServiceConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = create_database(config.storage)
        await db.connect()
        await create_tables(db)
        http = httpx.AsyncClient(timeout=config.providers.timeout, transport=transport)
        app.state.db = db
        app.state.http = http
        app.state.config = config
        try:
            yield
        finally:
            await http.aclose()
            await db.disconnect()

    app = FastAPI(title="Menu Decoder API", version="1.0.0", lifespan=lifespan)
    app.include_router(router)
    return app


app = create_app()
