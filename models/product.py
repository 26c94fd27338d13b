"""
Product related data models
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, Optional


def to_money(value: Any) -> Decimal:
    # floats go through str() so 19.99 stays 19.99
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid price: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid price: {value!r}") from None


@dataclass(frozen=True)
class Product:
    """Catalog product as supplied by the catalog data source"""
    product_id: str
    name: str
    price: Decimal
    image_url: Optional[str] = None

    def __post_init__(self):
        price = to_money(self.price)
        if not price.is_finite() or price < 0:
            raise ValueError(f"Price must be a non-negative amount: {self.price!r}")
        object.__setattr__(self, "product_id", str(self.product_id))
        object.__setattr__(self, "price", price)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Build a product from a catalog payload (camelCase or snake_case keys)"""
        product_id = data.get("product_id", data.get("id"))
        if product_id is None or product_id == "":
            raise ValueError("Product id is required")
        return cls(
            product_id=product_id,
            name=data.get("name", ""),
            price=data.get("price"),
            image_url=data.get("image_url", data.get("imageUrl"))
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "image_url": self.image_url
        }
