"""
Order Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from datetime import date
from decimal import Decimal
from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from core.exceptions import (
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)

# Import only models (no I/O dependencies)
from .models import Order, OrderFilter, OrderHeader


# ============================================================================
# Custom Exceptions - defined here to avoid importing repository
# ============================================================================

class OrderServiceError(ServiceError):
    """Base exception for order service errors"""
    pass


class OrderNotFoundError(NotFoundError):
    """Order not found error"""
    pass


class OrderValidationError(ValidationError):
    """Order validation error"""
    pass


class InvalidOrderStateError(InvalidStateError):
    """Order status does not allow the requested change"""
    pass


class OrderPermissionError(PermissionDeniedError):
    """Caller may not act on this order"""
    pass


# ============================================================================
# Repository Protocol
# ============================================================================

@runtime_checkable
class OrderRepositoryProtocol(Protocol):
    """
    Interface for Order Repository.

    Implementations must provide these methods.
    Used for dependency injection to enable testing.
    """

    def transaction(self) -> AsyncContextManager[Any]:
        """Scope in which every call runs in one database transaction"""
        ...

    async def list_orders(self, filters: OrderFilter) -> Tuple[List[Order], int]:
        """Page of orders (newest first) and the total match count"""
        ...

    async def get_order(self, order_id: int) -> Optional[Order]:
        """Order with store name, creator role and items"""
        ...

    async def get_order_header(self, order_id: int, for_update: bool = False) -> Optional[OrderHeader]:
        """Order id/store/status, optionally row-locked"""
        ...

    async def store_exists(self, store_id: int) -> bool:
        ...

    async def get_item_prices(self, item_ids: List[int]) -> Dict[int, Optional[Decimal]]:
        """Current price per item id; unknown ids are absent"""
        ...

    async def create_order(
        self,
        store_id: int,
        order_code: str,
        created_by: str,
        delivery_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Insert a pending order with a zero total and return its id"""
        ...

    async def replace_order_items(self, order_id: int, lines: List[Dict[str, Any]]) -> None:
        """Delete existing lines and insert ``lines``"""
        ...

    async def update_order(self, order_id: int, fields: Dict[str, Any]) -> bool:
        ...

    async def health_check(self) -> bool:
        ...
