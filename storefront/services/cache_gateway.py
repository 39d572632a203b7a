"""
Read-through cache in front of the catalog store.

Each resource (products, categories, config) is cached as one blob with the
time it was refreshed. A payload is served while it is younger than the TTL;
otherwise the store is queried again and the entry replaced. Concurrent
misses are not coordinated: each one queries the store and the last write
wins.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Protocol, TypeVar

from storefront.constants import CATEGORIES, CONFIG, PRODUCTS, RESOURCES
from storefront.models import Category, Product, StoreConfig
from storefront.services.catalog import to_categories, to_config, to_product, to_products

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 5 * 60

# sqlite INTEGER es de 64 bits con signo
MAX_PRODUCT_ID = 2**63 - 1
_PRODUCT_ID_RE = re.compile(r"\d+", re.ASCII)


class CatalogStore(Protocol):
    async def fetch_products(self) -> List[Dict[str, Any]]: ...

    async def fetch_product(self, product_id: int) -> Optional[Dict[str, Any]]: ...

    async def fetch_categories(self) -> List[Dict[str, Any]]: ...

    async def fetch_config(self) -> Optional[Dict[str, Any]]: ...


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    payload: Optional[T] = None
    last_refreshed_at: float = 0.0

    def is_fresh(self, now: float, ttl: float) -> bool:
        return self.payload is not None and now - self.last_refreshed_at < ttl


class CacheGateway:
    def __init__(
        self,
        store: CatalogStore,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry[Any]] = {r: CacheEntry() for r in RESOURCES}
        self._loaders: Dict[str, Callable[[], Awaitable[Any]]] = {
            PRODUCTS: self._load_products,
            CATEGORIES: self._load_categories,
            CONFIG: self._load_config,
        }

    def entry(self, resource: str) -> CacheEntry[Any]:
        return self._entries[resource]

    async def get(self, resource: str) -> Any:
        if resource not in self._loaders:
            raise KeyError(f"unknown resource: {resource}")

        now = self._clock()
        entry = self._entries[resource]
        if entry.is_fresh(now, self.ttl):
            logger.debug("Serving %s from cache", resource)
            return entry.payload

        # si el store falla la excepción sube y la entrada queda intacta
        payload = await self._loaders[resource]()
        self._entries[resource] = CacheEntry(payload=payload, last_refreshed_at=now)
        logger.info("Refreshed %s cache", resource)
        return payload

    async def _load_products(self) -> List[Product]:
        return to_products(await self.store.fetch_products())

    async def _load_categories(self) -> List[Category]:
        return to_categories(await self.store.fetch_categories())

    async def _load_config(self) -> StoreConfig:
        return to_config(await self.store.fetch_config())

    async def get_products(self) -> List[Product]:
        return await self.get(PRODUCTS)

    async def get_categories(self) -> List[Category]:
        return await self.get(CATEGORIES)

    async def get_config(self) -> StoreConfig:
        return await self.get(CONFIG)

    async def get_product(self, product_id: str) -> Optional[Product]:
        """Single product lookup, always straight from the store."""
        if not _PRODUCT_ID_RE.fullmatch(product_id):
            return None
        pid = int(product_id)
        if pid > MAX_PRODUCT_ID:
            return None
        row = await self.store.fetch_product(pid)
        return to_product(row) if row else None
