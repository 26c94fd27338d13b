"""
Models package for Luxe Storefront
Contains data models and type definitions
"""

from .product import Product
from .cart import CartLine, CartSummary
from .checkout import CheckoutStep, ShippingInfo, PaymentInfo
from .order import Order, OrderItem, OrderStatus

__all__ = [
    'Product',
    'CartLine', 'CartSummary',
    'CheckoutStep', 'ShippingInfo', 'PaymentInfo',
    'Order', 'OrderItem', 'OrderStatus'
]
