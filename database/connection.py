"""
Database connection management
"""
import sqlite3
from contextlib import contextmanager
from typing import Generator


class DatabaseConnection:
    # Owns the SQLite file backing cart storage and locally persisted orders

    def __init__(self, db_path: str = "luxe_storefront.db"):
        # Set database file path and create tables
        self.db_path = db_path
        self.init_database()

    def init_database(self):
        # Create the tables this storefront needs if they are missing
        with self.get_connection() as conn:
            cursor = conn.cursor()

            # On-device key-value storage (cart contents live under one key)
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Storage (
                storage_key TEXT PRIMARY KEY,
                value BLOB NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            ''')

            # Orders placed through checkout when no remote order service is configured
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Orders (
                order_id TEXT PRIMARY KEY,
                customer_name TEXT NOT NULL,
                email TEXT NOT NULL,
                address TEXT NOT NULL,
                city TEXT NOT NULL,
                zip TEXT NOT NULL,
                total TEXT NOT NULL,
                status TEXT DEFAULT 'confirmed',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            ''')

            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Order_Items (
                order_item_id TEXT PRIMARY KEY,
                order_id TEXT NOT NULL,
                product_id TEXT NOT NULL,
                quantity INTEGER NOT NULL,
                price TEXT NOT NULL,
                FOREIGN KEY(order_id) REFERENCES Orders(order_id)
            )
            ''')

            conn.commit()

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        # One short-lived connection per call; safe to use from worker threads
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
        finally:
            conn.close()
