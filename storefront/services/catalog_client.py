"""
Async client for the storefront API, used by the chat client and the
suggestion lookup.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, TypeVar

import httpx

from storefront.config import settings
from storefront.models import Category, Product, StoreConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogError(RuntimeError):
    """Raised when the catalog cannot be loaded; callers may retry."""


class ProductNotFoundError(CatalogError):
    """Raised when a single product lookup returns 404."""


class CatalogClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.http_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_json(self, path: str, *, not_found: Optional[str] = None) -> Any:
        logger.debug("Fetching: %s%s", self.base_url, path)
        try:
            response = await self._client.get(path)
            if not_found and response.status_code == 404:
                raise ProductNotFoundError(not_found)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            logger.error("Fetch error for %s: %s", path, exc)
            raise CatalogError(str(exc)) from exc
        except ValueError as exc:
            logger.error("Invalid JSON from %s: %s", path, exc)
            raise CatalogError(str(exc)) from exc

    def _parse(self, path: str, build: Callable[[Any], T], data: Any) -> T:
        try:
            return build(data)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.error("Malformed payload from %s: %r", path, exc)
            raise CatalogError(f"malformed payload from {path}: {exc!r}") from exc

    async def get_products(self) -> List[Product]:
        data = await self._get_json("/products")
        return self._parse("/products", lambda d: [Product.from_dict(p) for p in d], data)

    async def get_product(self, product_id: str) -> Product:
        path = f"/products/{product_id}"
        data = await self._get_json(path, not_found=f"Product not found: {product_id}")
        return self._parse(path, Product.from_dict, data)

    async def get_categories(self) -> List[Category]:
        data = await self._get_json("/categories")
        return self._parse("/categories", lambda d: [Category.from_dict(c) for c in d], data)

    async def get_config(self) -> StoreConfig:
        try:
            data = await self._get_json("/config")
            return self._parse("/config", StoreConfig.from_dict, data)
        except CatalogError as exc:
            logger.warning("Config fetch failed, using default: %s", exc)
            return StoreConfig(app_name=settings.app_name, whatsapp_number="")
