"""
Services package for Luxe Storefront
Contains business logic services
"""

from .cart_service import CartService
from .order_service import OrderService
from .checkout_service import CheckoutService, validate_shipping, validate_payment

__all__ = [
    'CartService', 'OrderService', 'CheckoutService',
    'validate_shipping', 'validate_payment'
]
