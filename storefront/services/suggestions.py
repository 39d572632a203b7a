from __future__ import annotations

import asyncio
import logging
import unicodedata
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Set

from storefront.cart.engine import CartEngine
from storefront.constants import (
    CAMERA_KEYWORDS,
    MAX_SUGGESTIONS,
    MEMORY_CARD_KEYWORDS,
    STORAGE_CATEGORY_KEYWORDS,
    STORAGE_PRODUCT_KEYWORDS,
)
from storefront.models import CartLine, Product

logger = logging.getLogger(__name__)

ProductsFetcher = Callable[[], Awaitable[List[Product]]]


def normalize_text(v: Any) -> str:
    """Lowercase and strip accents: 'Cámara' -> 'camara'."""
    decomposed = unicodedata.normalize("NFD", str(v or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _contains(keywords: Iterable[str], *fields: Any) -> bool:
    texts = [normalize_text(f) for f in fields if f]
    return any(k in t for k in keywords for t in texts)


def is_camera(p: Product) -> bool:
    return _contains(CAMERA_KEYWORDS, p.category_name, p.sub_category_name, p.name)


def is_memory_card(p: Product) -> bool:
    return _contains(MEMORY_CARD_KEYWORDS, p.sub_category_name, p.name)


def is_storage(p: Product) -> bool:
    return _contains(STORAGE_CATEGORY_KEYWORDS, p.category_name) or _contains(
        STORAGE_PRODUCT_KEYWORDS, p.sub_category_name, p.name
    )


def needs_memory_card(lines: List[CartLine]) -> bool:
    products = [line.product for line in lines]
    return any(is_camera(p) for p in products) and not any(is_memory_card(p) for p in products)


async def suggest_products(
    lines: List[CartLine], fetch_products: ProductsFetcher, limit: int = MAX_SUGGESTIONS
) -> List[Product]:
    """Cross-sell for the current cart. Never raises: a failed lookup means no suggestions."""
    if not lines or not needs_memory_card(lines):
        return []
    try:
        catalog = await fetch_products()
    except Exception:
        logger.exception("Error fetching suggestions")
        return []
    return [p for p in catalog if is_storage(p)][:limit]


class SuggestionWatcher:
    """Keeps `suggestions` in sync with a cart engine.

    Each cart change schedules a recompute on the running loop; a result that
    arrives after a newer recompute started is dropped.
    """

    def __init__(self, engine: CartEngine, fetch_products: ProductsFetcher, limit: int = MAX_SUGGESTIONS):
        self.engine = engine
        self.fetch_products = fetch_products
        self.limit = limit
        self.suggestions: List[Product] = []
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        engine.subscribe(self._on_change)

    def _on_change(self, lines: List[CartLine]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # sin loop: el siguiente refresh() explícito recalcula
            return
        task = loop.create_task(self.refresh(lines))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._task = task

    async def refresh(self, lines: Optional[List[CartLine]] = None) -> List[Product]:
        self._generation += 1
        generation = self._generation
        current = self.engine.lines if lines is None else lines
        result = await suggest_products(current, self.fetch_products, self.limit)
        if generation == self._generation:
            self.suggestions = result
        return self.suggestions

    async def wait(self) -> List[Product]:
        """Waits for the last scheduled recompute, if any."""
        if self._task is not None:
            await self._task
        return self.suggestions
