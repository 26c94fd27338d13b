"""
Database repository classes
"""
import logging
import sqlite3
import uuid
from decimal import Decimal
from typing import List, Optional, Dict, Any, Sequence

from models.checkout import ShippingInfo
from models.order import OrderItem, OrderStatus
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


class KeyValueRepository:
    # Durable key-value storage on top of the Storage table

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection

    def get(self, key: str) -> Optional[bytes]:
        # Stored bytes for the key, or None when absent
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM Storage WHERE storage_key = ?", (key,))
            row = cursor.fetchone()
            if row is None:
                return None
            value = row[0]
            # Older rows may have been written as TEXT
            return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    def set(self, key: str, value: bytes) -> bool:
        # Insert or overwrite the key
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                INSERT INTO Storage (storage_key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(storage_key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """, (key, sqlite3.Binary(value)))

                conn.commit()
                return True
            except sqlite3.Error:
                logger.exception("Failed to write storage key %s", key)
                return False


class OrderRepository:
    # Local order service: order and order item rows in SQLite

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection

    def create_order(self, shipping_info: ShippingInfo, total: Decimal) -> Optional[str]:
        # Insert the order row and return its new id, None on failure
        order_id = str(uuid.uuid4())
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.execute("""
                INSERT INTO Orders (
                    order_id, customer_name, email, address, city, zip, total, status
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    order_id, shipping_info.full_name, shipping_info.email,
                    shipping_info.address_line, shipping_info.city, shipping_info.postal_code,
                    str(total), OrderStatus.CONFIRMED.value
                ))

                conn.commit()
                return order_id

            except sqlite3.Error:
                logger.exception("Failed to insert order")
                return None

    def create_order_items(self, order_id: str, line_items: Sequence[OrderItem]) -> bool:
        # Insert every item of the order in one transaction
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            try:
                cursor.executemany("""
                INSERT INTO Order_Items (order_item_id, order_id, product_id, quantity, price)
                VALUES (?, ?, ?, ?, ?)
                """, [
                    (str(uuid.uuid4()), order_id, item.product_id, item.quantity, str(item.unit_price))
                    for item in line_items
                ])

                conn.commit()
                return True

            except sqlite3.Error:
                conn.rollback()
                logger.exception("Failed to insert items for order %s", order_id)
                return False

    def get_order_details(self, order_id: str) -> Optional[Dict[str, Any]]:
        # Order row plus its items, None when the order does not exist
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
            SELECT order_id, customer_name, email, address, city, zip, total, status, created_at
            FROM Orders WHERE order_id = ?
            """, (order_id,))

            order_row = cursor.fetchone()
            if not order_row:
                return None

            cursor.execute("""
            SELECT product_id, quantity, price
            FROM Order_Items WHERE order_id = ?
            ORDER BY rowid
            """, (order_id,))

            order_items: List[Dict[str, Any]] = []
            for item_row in cursor.fetchall():
                order_items.append({
                    "product_id": item_row[0],
                    "quantity": item_row[1],
                    "unit_price": item_row[2]
                })

            return {
                "order_info": {
                    "order_id": order_row[0],
                    "customer_name": order_row[1],
                    "email": order_row[2],
                    "address": order_row[3],
                    "city": order_row[4],
                    "zip": order_row[5],
                    "total": order_row[6],
                    "status": order_row[7],
                    "created_at": order_row[8]
                },
                "order_items": order_items
            }
