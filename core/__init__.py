"""
Core package for Luxe Storefront
Contains main orchestration
"""

from .storefront import LuxeStorefront

__all__ = [
    'LuxeStorefront'
]
