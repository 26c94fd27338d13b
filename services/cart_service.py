"""
Cart service - the shopper's in-progress selection
"""
import json
import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Any, Optional, Tuple

from models.cart import CartLine, CartSummary
from models.product import Product
from .protocols import KeyValueStorage

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "luxe-cart"


class CartService:
    # Owns the cart lines and keeps a durable copy of them in storage

    def __init__(self, storage: KeyValueStorage, storage_key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.storage_key = storage_key
        self.is_open = False
        self._lines: Dict[str, CartLine] = self._load()

    # === persistence ===
    def _load(self) -> Dict[str, CartLine]:
        # Read the persisted cart; anything unreadable means an empty cart
        try:
            raw = self.storage.get(self.storage_key)
        except Exception:
            logger.warning("Could not read stored cart, starting empty", exc_info=True)
            return {}

        if raw is None:
            return {}

        try:
            entries = json.loads(raw.decode("utf-8"))
            if not isinstance(entries, list):
                raise ValueError("Stored cart is not a list")

            lines: Dict[str, CartLine] = {}
            for entry in entries:
                line = CartLine.from_dict(entry)
                if line.product_id in lines:
                    raise ValueError(f"Duplicate cart line for {line.product_id}")
                lines[line.product_id] = line
        except (ValueError, TypeError, KeyError, AttributeError, RecursionError) as e:
            logger.warning("Stored cart is corrupt, starting empty: %s", e)
            return {}

        logger.debug("Restored cart with %d lines", len(lines))
        return lines

    def _save(self):
        payload = json.dumps([line.to_dict() for line in self._lines.values()])
        try:
            saved = self.storage.set(self.storage_key, payload.encode("utf-8"))
        except Exception:
            logger.warning("Could not persist cart", exc_info=True)
            return
        if not saved:
            logger.warning("Storage refused cart write for key %s", self.storage_key)

    # === mutations ===
    def add_item(self, product: Product):
        # Existing line gets one more; otherwise a new line snapshots name/price/image
        line = self._lines.get(product.product_id)
        if line:
            line.quantity += 1
        else:
            self._lines[product.product_id] = CartLine(
                product_id=product.product_id,
                name=product.name,
                unit_price=product.price,
                quantity=1,
                image_url=product.image_url
            )
        logger.debug("Added %s to cart", product.product_id)
        self._save()
        self.open_cart()

    def update_quantity(self, product_id: str, delta: int):
        # Apply delta; a line that drops to zero or below is removed
        line = self._lines.get(product_id)
        if not line:
            return

        line.quantity += delta
        if line.quantity <= 0:
            del self._lines[product_id]
            logger.debug("Removed %s from cart (quantity reached zero)", product_id)
        self._save()

    def remove_item(self, product_id: str):
        if self._lines.pop(product_id, None) is None:
            return
        logger.debug("Removed %s from cart", product_id)
        self._save()

    def clear(self):
        self._lines.clear()
        logger.debug("Cart cleared")
        self._save()

    def open_cart(self):
        self.is_open = True

    def close_cart(self):
        self.is_open = False

    # === reads ===
    @property
    def lines(self) -> List[CartLine]:
        # Copies, so callers can never mutate the store's own lines
        return [replace(line) for line in self._lines.values()]

    def get_line(self, product_id: str) -> Optional[CartLine]:
        line = self._lines.get(product_id)
        return replace(line) if line else None

    @property
    def count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def total(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    def summary(self) -> CartSummary:
        return CartSummary(total_items=len(self._lines), count=self.count, total=self.total)

    def snapshot(self) -> Tuple[List[CartLine], CartSummary]:
        """Detached copy of the lines with their summary, taken at one instant."""
        return self.lines, self.summary()

    def get_cart_details(self) -> Dict[str, Any]:
        # Current lines and totals in the shape the presentation layer renders
        lines, summary = self.snapshot()
        cart_items = []
        for line in lines:
            item = line.to_dict()
            item["line_total"] = str(line.line_total)
            cart_items.append(item)

        message = f"Your cart has {summary.count} item(s)." if lines else "Your cart is empty"
        return {
            "success": True,
            "is_open": self.is_open,
            "cart_items": cart_items,
            "summary": summary.to_dict(),
            "message": message
        }
