"""
Order service - persists checkout orders, falling back to a local reference
"""
import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Callable, Optional, Sequence

from models.cart import CartLine
from models.checkout import ShippingInfo
from models.order import Order, OrderItem, OrderStatus
from .protocols import OrderBackend

logger = logging.getLogger(__name__)

FALLBACK_PREFIX = "LUXE-"
_BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class OrderSubmissionError(Exception):
    """Raised internally when the order backend does not accept an order."""


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("Cannot encode a negative number")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


class OrderService:
    # Hands finished checkouts to the order backend.
    # Every failure is absorbed: the caller always receives an order id.

    def __init__(self, order_backend: OrderBackend, submit_timeout: Optional[float] = None,
                 clock: Callable[[], float] = time.time):
        self.order_backend = order_backend
        self.submit_timeout = submit_timeout
        self.clock = clock
        # Kept off the loop default executor, which asyncio.run joins on exit
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="order-submit")

    def fallback_order_id(self) -> str:
        # LUXE-<millisecond timestamp in base36>
        millis = int(self.clock() * 1000)
        return FALLBACK_PREFIX + to_base36(millis)

    def _persist(self, shipping_info: ShippingInfo, total: Decimal,
                 line_items: Sequence[OrderItem]) -> Order:
        # Create the order row, then its items; blocking, runs in a worker thread
        order_id = self.order_backend.create_order(shipping_info, total)
        if not order_id:
            raise OrderSubmissionError("Order backend did not return an order id")

        order = Order(
            order_id=order_id,
            shipping_info=shipping_info,
            total=total,
            status=OrderStatus.CONFIRMED,
            line_items=tuple(line_items)
        )

        if not self.order_backend.create_order_items(order.order_id, order.line_items):
            raise OrderSubmissionError(f"Order {order.order_id} was created but its items were rejected")
        return order

    async def submit_order(self, lines: Sequence[CartLine], total: Decimal,
                           shipping_info: ShippingInfo) -> str:
        """Persist the order and return its id.

        Never raises. When the backend fails, times out, or only half-succeeds,
        a locally generated ``LUXE-...`` id is returned instead.
        """
        line_items = [
            OrderItem(product_id=line.product_id, quantity=line.quantity, unit_price=line.unit_price)
            for line in lines
        ]

        loop = asyncio.get_running_loop()
        call = loop.run_in_executor(self._executor, self._persist, shipping_info, total, line_items)
        try:
            if self.submit_timeout is None:
                order = await call
            else:
                order = await asyncio.wait_for(call, timeout=self.submit_timeout)
        except asyncio.TimeoutError:
            fallback_id = self.fallback_order_id()
            logger.warning("Order submission timed out after %ss, using %s", self.submit_timeout, fallback_id)
            return fallback_id
        except Exception as e:
            fallback_id = self.fallback_order_id()
            logger.warning("Order submission failed (%s), using %s", e, fallback_id)
            return fallback_id

        logger.info("Order %s persisted with %d items, total %s", order.order_id, len(order.line_items), order.total)
        return order.order_id
