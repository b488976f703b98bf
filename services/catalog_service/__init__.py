"""
Catalog Service

Categories and products (the item master).
"""

from .catalog_service import CatalogService

__all__ = ["CatalogService"]
