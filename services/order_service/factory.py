"""
Order Service Factory

Builds the order service with its repository injected.
"""

from core.postgres_client import PostgresClientWrapper

from .order_repository import OrderRepository
from .order_service import OrderService


def create_order_service(db: PostgresClientWrapper) -> OrderService:
    """Create an OrderService bound to the shared database client"""
    return OrderService(repository=OrderRepository(db))
