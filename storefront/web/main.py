from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from storefront.config import LOG_FORMAT, settings
from storefront.db.sqlite import SqliteStore, StoreError
from storefront.services.cache_gateway import CacheGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _gateway(request: Request) -> CacheGateway:
    return request.app.state.gateway


def _store_failed(path: str, e: StoreError) -> PlainTextResponse:
    logger.error("Error in %s: %s", path, e)
    return PlainTextResponse(str(e), status_code=500)


# ---------------- config ----------------

@router.get("/config")
async def get_config(request: Request) -> Any:
    try:
        config = await _gateway(request).get_config()
    except StoreError as e:
        return _store_failed("/api/config", e)
    return config.to_dict()


# ---------------- categories ----------------

@router.get("/categories")
async def get_categories(request: Request) -> Any:
    try:
        categories = await _gateway(request).get_categories()
    except StoreError as e:
        return _store_failed("/api/categories", e)
    return [c.to_dict() for c in categories]


# ---------------- products ----------------

@router.get("/products")
async def get_products(request: Request) -> Any:
    try:
        products = await _gateway(request).get_products()
    except StoreError as e:
        return _store_failed("/api/products", e)
    return [p.to_dict() for p in products]


@router.get("/products/{product_id}")
async def get_product(product_id: str, request: Request) -> Any:
    try:
        product = await _gateway(request).get_product(product_id)
    except StoreError as e:
        return _store_failed("/api/products/:id", e)
    if product is None:
        return PlainTextResponse("Product not found", status_code=404)
    return JSONResponse(product.to_dict())


def create_app(gateway: Optional[CacheGateway] = None) -> FastAPI:
    store: Optional[SqliteStore] = None
    if gateway is None:
        store = SqliteStore(settings.db_path)
        gateway = CacheGateway(store, ttl=settings.cache_ttl_seconds)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
        if store is not None:
            store.init_db()
        yield

    app = FastAPI(title="Safari Web API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.state.gateway = gateway
    app.include_router(router)
    return app


app = create_app()
