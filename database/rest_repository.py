"""
Remote order service client.

Talks to a PostgREST-style HTTP API (the hosted order database the storefront
writes to): ``POST {base_url}/orders`` returns the inserted row when asked for
``return=representation``, ``POST {base_url}/order_items`` takes a JSON array.

Like the SQLite repositories, failures are reported through the return value
(``None`` / ``False``) rather than raised.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

import requests

from models.checkout import ShippingInfo
from models.order import OrderItem, OrderStatus

logger = logging.getLogger(__name__)


class RestOrderRepository:

    def __init__(self, base_url: str, api_key: str = "", timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Prefer": "return=representation",
        }
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _post(self, table: str, payload: Any) -> Optional[requests.Response]:
        url = f"{self.base_url}/{table}"
        try:
            resp = self.session.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Order service unreachable at %s: %s", url, e)
            return None

        if resp.status_code not in (200, 201):
            # Response bodies can be large; keep the log line short
            logger.warning("Order service rejected %s: HTTP %s %s", table, resp.status_code, resp.text[:200])
            return None
        return resp

    def create_order(self, shipping_info: ShippingInfo, total: Decimal) -> Optional[str]:
        """Insert an order row remotely and return the id the service assigned."""
        resp = self._post("orders", {
            "customer_name": shipping_info.full_name,
            "email": shipping_info.email,
            "address": shipping_info.address_line,
            "city": shipping_info.city,
            "zip": shipping_info.postal_code,
            "total": float(total),
            "status": OrderStatus.CONFIRMED.value,
        })
        if resp is None:
            return None

        try:
            body = resp.json()
        except ValueError:
            logger.warning("Order service returned a non-JSON body")
            return None

        # PostgREST returns a list of inserted rows unless a single object is requested
        row = body[0] if isinstance(body, list) and body else body
        order_id = row.get("id") if isinstance(row, dict) else None
        if order_id is None:
            logger.warning("Order service response carried no order id")
            return None
        return str(order_id)

    def create_order_items(self, order_id: str, line_items: Sequence[OrderItem]) -> bool:
        """Insert the order's line items remotely."""
        payload = [
            {
                "order_id": order_id,
                "product_id": item.product_id,
                "quantity": item.quantity,
                "price": float(item.unit_price),
            }
            for item in line_items
        ]
        return self._post("order_items", payload) is not None
