"""
Interfaces of the collaborators the services depend on
"""
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from models.checkout import ShippingInfo
from models.order import OrderItem


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> bool:
        ...


class OrderBackend(Protocol):
    def create_order(self, shipping_info: ShippingInfo, total: Decimal) -> Optional[str]:
        ...

    def create_order_items(self, order_id: str, line_items: Sequence[OrderItem]) -> bool:
        ...
