from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    price: float
    stock: int
    category_id: str
    images: List[str] = field(default_factory=list)
    category_name: str = ""
    sub_category_name: str = ""
    video_url: Optional[str] = None

    @property
    def main_image(self) -> str:
        return self.images[0] if self.images else ""

    @property
    def available(self) -> bool:
        return self.stock > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "categoryId": self.category_id,
            "categoryName": self.category_name,
            "subCategoryName": self.sub_category_name,
            "images": list(self.images),
            "videoUrl": self.video_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Builds a Product from the API (camelCase) shape.

        Raises KeyError/TypeError/ValueError when required fields are missing
        or have the wrong type.
        """
        images = data.get("images") or []
        if not isinstance(images, list):
            raise TypeError("images must be a list")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=str(data.get("description") or ""),
            price=data.get("price", 0),
            stock=int(data.get("stock") or 0),
            category_id=str(data.get("categoryId") or ""),
            images=[str(i) for i in images],
            category_name=str(data.get("categoryName") or ""),
            sub_category_name=str(data.get("subCategoryName") or ""),
            video_url=data.get("videoUrl") or None,
        )


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "image": self.image}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(id=str(data["id"]), name=str(data["name"]), image=data.get("image"))


@dataclass(frozen=True)
class StoreConfig:
    app_name: str
    whatsapp_number: str

    def to_dict(self) -> Dict[str, Any]:
        return {"appName": self.app_name, "whatsappNumber": self.whatsapp_number}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreConfig":
        return cls(
            app_name=str(data.get("appName") or ""),
            whatsapp_number=str(data.get("whatsappNumber") or ""),
        )


@dataclass(frozen=True)
class CartLine:
    """Frozen product snapshot plus the quantity the user wants."""

    product: Product
    quantity: int

    @property
    def id(self) -> str:
        return self.product.id

    @property
    def name(self) -> str:
        return self.product.name

    @property
    def price(self) -> Any:
        return self.product.price

    def with_quantity(self, quantity: int) -> "CartLine":
        return replace(self, quantity=quantity)

    def to_dict(self) -> Dict[str, Any]:
        data = self.product.to_dict()
        data["quantity"] = self.quantity
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValueError(f"invalid quantity: {quantity!r}")
        return cls(product=Product.from_dict(data), quantity=quantity)


@dataclass(frozen=True)
class AddedToCart:
    product_id: str
    image: str
    x: Optional[float] = None
    y: Optional[float] = None
