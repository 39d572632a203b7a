import asyncio
from typing import Any, Dict, List, Optional

import pytest

from storefront.cart.storage import MemoryCartStorage
from storefront.db.sqlite import StoreError
from storefront.models import Product


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeStore:
    """In-memory backing store that counts queries and can be told to fail."""

    def __init__(self):
        self.products: List[Dict[str, Any]] = [
            {
                "Id": 1,
                "Nombre": "Cámara IP Wifi",
                "Descripcion": "Cámara de seguridad",
                "Precio": 35.5,
                "Stock": 4,
                "CategoriaId": 10,
                "CategoriaNombre": "Cámaras",
                "SubcategoriaNombre": "Cámaras IP",
                "FotoUrl": "https://img/cam.jpg",
                "UrlVideo": None,
                "Galeria": ["https://img/cam-1.jpg", "https://img/cam-2.jpg"],
            },
        ]
        self.categories: List[Dict[str, Any]] = [{"Id": 10, "Nombre": "Cámaras"}]
        self.config: Optional[Dict[str, Any]] = {"NombreComercial": "Safari", "Telefono": "099-123-4567"}
        self.calls: Dict[str, int] = {"products": 0, "product": 0, "categories": 0, "config": 0}
        self.fail = False

    async def _hit(self, name: str) -> None:
        self.calls[name] += 1
        await asyncio.sleep(0)
        if self.fail:
            raise StoreError("connection reset")

    async def fetch_products(self):
        await self._hit("products")
        return [dict(p) for p in self.products]

    async def fetch_product(self, product_id: int):
        await self._hit("product")
        for p in self.products:
            if p["Id"] == product_id:
                return dict(p)
        return None

    async def fetch_categories(self):
        await self._hit("categories")
        return [dict(c) for c in self.categories]

    async def fetch_config(self):
        await self._hit("config")
        return dict(self.config) if self.config else None


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def storage():
    return MemoryCartStorage()


@pytest.fixture
def make_product():
    def _make(id: str = "1", name: str = "Producto", price: Any = 10, **kwargs) -> Product:
        kwargs.setdefault("description", "")
        kwargs.setdefault("stock", 5)
        kwargs.setdefault("category_id", "1")
        kwargs.setdefault("images", [f"https://img/{id}.jpg"])
        return Product(id=id, name=name, price=price, **kwargs)

    return _make
