"""
Shared fakes for the test suite
"""
import threading
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from models.product import Product


class MemoryStorage:
    """In-memory key-value storage"""

    def __init__(self):
        self.data: Dict[str, bytes] = {}
        self.writes = 0

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> bool:
        self.data[key] = value
        self.writes += 1
        return True


class RecordingOrderBackend:
    """Order backend that accepts everything and remembers it"""

    def __init__(self, order_id: str = "order-1"):
        self.order_id = order_id
        self.orders: List[tuple] = []
        self.items: Dict[str, list] = {}

    def create_order(self, shipping_info, total: Decimal) -> Optional[str]:
        self.orders.append((shipping_info, total))
        return self.order_id

    def create_order_items(self, order_id: str, line_items: Sequence) -> bool:
        self.items[order_id] = list(line_items)
        return True


class FailingOrderBackend:
    """Order backend that is always down"""

    def __init__(self):
        self.calls = 0

    def create_order(self, shipping_info, total):
        self.calls += 1
        raise ConnectionError("order service unreachable")

    def create_order_items(self, order_id, line_items):
        raise ConnectionError("order service unreachable")


class BlockingOrderBackend(RecordingOrderBackend):
    """Order backend that holds create_order until released"""

    def __init__(self, order_id: str = "order-slow"):
        super().__init__(order_id)
        self.release = threading.Event()

    def create_order(self, shipping_info, total):
        self.release.wait(timeout=5)
        return super().create_order(shipping_info, total)


def make_product(product_id: str = "p1", price: str = "10.00", name: Optional[str] = None) -> Product:
    return Product(
        product_id=product_id,
        name=name or f"Product {product_id}",
        price=Decimal(price),
        image_url=f"https://img.example.com/{product_id}.jpg"
    )


VALID_SHIPPING = {
    "full_name": "John Doe",
    "email": "john@example.com",
    "address_line": "123 Main Street",
    "city": "New York",
    "postal_code": "10001",
}

VALID_PAYMENT = {
    "card_number": "4242 4242 4242 4242",
    "expiry": "12/30",
    "cvv": "123",
}
