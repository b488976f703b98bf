"""
Catalog Service Factory
"""

from core.postgres_client import PostgresClientWrapper

from .catalog_repository import CatalogRepository
from .catalog_service import CatalogService


def create_catalog_service(db: PostgresClientWrapper) -> CatalogService:
    """Create a CatalogService bound to the shared database client"""
    return CatalogService(repository=CatalogRepository(db))
