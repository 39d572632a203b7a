"""
Client-side shopping cart.

The engine keeps an ordered list of CartLine snapshots, saves the whole list
after every mutation and rebuilds it from storage on start. Totals and counts
are derived from the line list each time they are asked for.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, List, Optional, Tuple

from storefront.cart.storage import CartStorage
from storefront.constants import CART_STORAGE_KEY, CART_STORAGE_VERSION
from storefront.models import AddedToCart, CartLine, Product
from storefront.utils.formatters import is_number

logger = logging.getLogger(__name__)

ChangeListener = Callable[[List[CartLine]], None]
AddListener = Callable[[AddedToCart], None]


def cart_total(lines: List[CartLine]) -> float:
    return sum((line.price if is_number(line.price) else 0) * line.quantity for line in lines)


def cart_count(lines: List[CartLine]) -> int:
    return sum(line.quantity for line in lines)


def dump_state(lines: List[CartLine]) -> str:
    return json.dumps(
        {"state": {"items": [line.to_dict() for line in lines]}, "version": CART_STORAGE_VERSION},
        ensure_ascii=False,
    )


def load_state(raw: str) -> List[CartLine]:
    """Parses a stored snapshot. Raises ValueError/KeyError/TypeError when it is corrupt."""
    data = json.loads(raw)
    items = data["state"]["items"]
    if not isinstance(items, list):
        raise TypeError("items must be a list")

    lines: List[CartLine] = []
    seen = set()
    for item in items:
        line = CartLine.from_dict(item)
        if line.id in seen:
            raise ValueError(f"duplicated line for product {line.id}")
        seen.add(line.id)
        lines.append(line)
    return lines


class CartEngine:
    def __init__(self, storage: CartStorage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._lines: List[CartLine] = self._restore()
        self._change_listeners: List[ChangeListener] = []
        self._add_listeners: List[AddListener] = []

    def _restore(self) -> List[CartLine]:
        raw = self.storage.load(self.key)
        if raw is None:
            return []
        try:
            return load_state(raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding corrupt cart snapshot under %r: %s", self.key, e)
            return []

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def subscribe(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    def on_added(self, listener: AddListener) -> None:
        self._add_listeners.append(listener)

    def _commit(self, lines: List[CartLine]) -> None:
        # si save falla el estado en memoria no cambia
        self.storage.save(self.key, dump_state(lines))
        self._lines = lines
        snapshot = self.lines
        for listener in self._change_listeners:
            listener(snapshot)

    # ---------------- mutations ----------------

    def add_to_cart(self, product: Product, origin: Optional[Tuple[float, float]] = None) -> None:
        if any(line.id == product.id for line in self._lines):
            lines = [
                line.with_quantity(line.quantity + 1) if line.id == product.id else line
                for line in self._lines
            ]
        else:
            lines = self._lines + [CartLine(product=product, quantity=1)]
        self._commit(lines)

        x, y = origin if origin else (None, None)
        event = AddedToCart(product_id=product.id, image=product.main_image, x=x, y=y)
        for listener in self._add_listeners:
            listener(event)

    def remove_from_cart(self, product_id: str) -> None:
        self._commit([line for line in self._lines if line.id != product_id])

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return
        self._commit(
            [line.with_quantity(quantity) if line.id == product_id else line for line in self._lines]
        )

    def clear_cart(self) -> None:
        self._commit([])

    # ---------------- derived ----------------

    def get_cart_total(self) -> float:
        return cart_total(self._lines)

    def get_cart_count(self) -> int:
        return cart_count(self._lines)

    def is_empty(self) -> bool:
        return not self._lines
