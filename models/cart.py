"""
Cart related data models
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, Optional

from .product import to_money

CENTS = Decimal("0.01")


@dataclass
class CartLine:
    """Cart line data model"""
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    image_url: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "image_url": self.image_url
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        """Rebuild a line from its persisted form, rejecting anything out of bounds"""
        if not isinstance(data, dict):
            raise TypeError("Cart line must be an object")

        product_id = data["product_id"]
        if not isinstance(product_id, str) or not product_id:
            raise ValueError("Cart line has no product id")

        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"Invalid quantity: {quantity!r}")

        unit_price = to_money(data["unit_price"])
        if not unit_price.is_finite() or unit_price < 0:
            raise ValueError(f"Invalid unit price: {data['unit_price']!r}")

        return cls(
            product_id=product_id,
            name=str(data.get("name", "")),
            unit_price=unit_price,
            quantity=quantity,
            image_url=data.get("image_url")
        )


@dataclass(frozen=True)
class CartSummary:
    """Cart summary data model"""
    total_items: int
    count: int
    total: Decimal

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "total_items": self.total_items,
            "count": self.count,
            "total": str(self.total.quantize(CENTS))
        }
