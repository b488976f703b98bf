"""
Store Service Factory
"""

from core.postgres_client import PostgresClientWrapper

from .store_repository import StoreRepository
from .store_service import StoreService


def create_store_service(db: PostgresClientWrapper) -> StoreService:
    """Create a StoreService bound to the shared database client"""
    return StoreService(repository=StoreRepository(db))
