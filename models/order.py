"""
Order related data models
"""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Tuple, Dict, Any

from .checkout import ShippingInfo


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class OrderItem:
    """Order item data model"""
    product_id: str
    quantity: int
    unit_price: Decimal

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price)
        }


@dataclass(frozen=True)
class Order:
    """Order data model"""
    order_id: str
    shipping_info: ShippingInfo
    total: Decimal
    status: OrderStatus
    line_items: Tuple[OrderItem, ...]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "order_id": self.order_id,
            "shipping_info": self.shipping_info.to_dict(),
            "total": str(self.total),
            "status": self.status.value,
            "line_items": [item.to_dict() for item in self.line_items]
        }
