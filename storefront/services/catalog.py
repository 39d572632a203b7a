from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from storefront.config import settings
from storefront.constants import (
    CATEGORY_IMAGE,
    DEFAULT_CATEGORY_NAME,
    DEFAULT_PRODUCT_NAME,
    PLACEHOLDER_IMAGE,
)
from storefront.models import Category, Product, StoreConfig
from storefront.utils.formatters import is_number
from storefront.utils.validators import digits_only

Row = Dict[str, Any]


def _as_str(v: Any) -> str:
    # JS-style (v || '').toString()
    return str(v) if v else ""


def build_images(gallery: Iterable[Any], main_photo: Any) -> List[str]:
    """Gallery urls in order, else the main photo, else the placeholder."""
    images = [url for url in gallery if isinstance(url, str) and url]
    if images:
        return images
    if main_photo:
        return [str(main_photo)]
    return [PLACEHOLDER_IMAGE]


def to_product(row: Row) -> Product:
    price = row.get("Precio")
    stock = row.get("Stock")
    return Product(
        id=_as_str(row.get("Id")),
        name=row.get("Nombre") or DEFAULT_PRODUCT_NAME,
        description=row.get("Descripcion") or "",
        price=float(price) if is_number(price) else 0,
        stock=int(stock) if is_number(stock) else 0,
        category_id=_as_str(row.get("CategoriaId")),
        category_name=row.get("CategoriaNombre") or "",
        sub_category_name=row.get("SubcategoriaNombre") or "",
        images=build_images(row.get("Galeria") or [], row.get("FotoUrl")),
        video_url=row.get("UrlVideo") or None,
    )


def to_products(rows: Iterable[Row]) -> List[Product]:
    return [to_product(r) for r in rows]


def to_category(row: Row) -> Category:
    return Category(
        id=str(row["Id"]),
        name=row.get("Nombre") or DEFAULT_CATEGORY_NAME,
        image=CATEGORY_IMAGE,
    )


def to_categories(rows: Iterable[Row]) -> List[Category]:
    return [to_category(r) for r in rows]


def to_config(row: Optional[Row]) -> StoreConfig:
    if not row:
        return StoreConfig(app_name=settings.app_name, whatsapp_number="")
    return StoreConfig(
        app_name=row.get("NombreComercial") or settings.app_name,
        whatsapp_number=digits_only(row.get("Telefono")),
    )
