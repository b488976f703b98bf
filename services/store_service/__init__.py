"""
Store Service

Franchise stores and the central kitchen.
"""

from .store_service import StoreService

__all__ = ["StoreService"]
