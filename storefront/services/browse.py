from __future__ import annotations

from typing import Dict, List, Optional

from storefront.constants import SORT_DEFAULT, SORT_PRICE_ASC, SORT_PRICE_DESC
from storefront.models import Category, Product
from storefront.services.suggestions import normalize_text


def categories_with_products(categories: List[Category], products: List[Product]) -> List[Category]:
    ids = {p.category_id for p in products}
    return [c for c in categories if c.id in ids]


def search_products(products: List[Product], query: str) -> List[Product]:
    q = normalize_text(query)
    if not q:
        return list(products)
    return [p for p in products if q in normalize_text(p.name) or q in normalize_text(p.description)]


def sort_products(products: List[Product], order: str = SORT_DEFAULT) -> List[Product]:
    if order == SORT_PRICE_ASC:
        return sorted(products, key=lambda p: p.price)
    if order == SORT_PRICE_DESC:
        return sorted(products, key=lambda p: p.price, reverse=True)
    return list(products)


def filter_products(
    products: List[Product],
    search: str = "",
    category_id: Optional[str] = None,
    order: str = SORT_DEFAULT,
) -> List[Product]:
    result = search_products(products, search) if search else list(products)
    if category_id:
        result = [p for p in result if p.category_id == category_id]
    return sort_products(result, order)


def group_by_category(
    products: List[Product], categories: List[Category], order: str = SORT_DEFAULT
) -> Dict[str, List[Product]]:
    """Products per category name, categories in alphabetical order; empty ones are skipped."""
    grouped: Dict[str, List[Product]] = {}
    for cat in sorted(categories, key=lambda c: c.name):
        items = [p for p in products if p.category_name == cat.name]
        if items:
            grouped[cat.name] = sort_products(items, order)
    return grouped
