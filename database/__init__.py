"""
Database package for Luxe Storefront
Contains database connection and repository classes
"""

from .connection import DatabaseConnection
from .repository import KeyValueRepository, OrderRepository
from .rest_repository import RestOrderRepository

__all__ = [
    'DatabaseConnection',
    'KeyValueRepository', 'OrderRepository', 'RestOrderRepository'
]
