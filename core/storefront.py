"""
Main LuxeStorefront class - wires storage, repositories and services
"""
import logging
from typing import Optional

from config import Settings
from database.connection import DatabaseConnection
from database.repository import KeyValueRepository, OrderRepository
from database.rest_repository import RestOrderRepository
from services.cart_service import CartService
from services.checkout_service import CheckoutService
from services.order_service import OrderService
from services.protocols import OrderBackend

logger = logging.getLogger(__name__)


class LuxeStorefront:
    # Builds and owns one cart store and one checkout workflow

    def __init__(self, settings: Optional[Settings] = None,
                 order_backend: Optional[OrderBackend] = None):
        self.settings = settings or Settings()

        # Storage layer
        self.db_connection = DatabaseConnection(self.settings.db_path)
        self.storage = KeyValueRepository(self.db_connection)
        self.order_backend = order_backend or self._build_order_backend()

        # Service layer
        self.cart_service = CartService(self.storage)
        self.order_service = OrderService(self.order_backend, submit_timeout=self.settings.submit_timeout)
        self.checkout_service = CheckoutService(self.cart_service, self.order_service)

    def _build_order_backend(self) -> OrderBackend:
        # Remote order service when configured, local SQLite orders otherwise
        if self.settings.order_api_url:
            logger.info("Using remote order service at %s", self.settings.order_api_url)
            return RestOrderRepository(
                self.settings.order_api_url,
                api_key=self.settings.order_api_key,
                timeout=self.settings.order_api_timeout
            )
        logger.info("Using local order storage in %s", self.settings.db_path)
        return OrderRepository(self.db_connection)
