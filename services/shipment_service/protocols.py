"""
Shipment Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol, runtime_checkable

from core.exceptions import (
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)

from .models import (
    Batch,
    BatchTraceEntry,
    OrderLine,
    OrderRef,
    Shipment,
    ShipmentFilter,
    ShipmentItem,
)


# ============================================================================
# Custom Exceptions
# ============================================================================

class ShipmentServiceError(ServiceError):
    """Base exception for shipment service errors"""
    pass


class ShipmentNotFoundError(NotFoundError):
    """Shipment, shipment item or batch not found"""
    pass


class ShipmentValidationError(ValidationError):
    """Shipment request violates a business rule"""
    pass


class InsufficientStockError(ShipmentValidationError):
    """Batch does not hold enough stock"""
    pass


class QuantityExceededError(ShipmentValidationError):
    """Shipping the quantity would exceed the ordered quantity"""
    pass


class InvalidShipmentStateError(InvalidStateError):
    """Shipment or order status does not allow the operation"""
    pass


class InvalidShipmentTransitionError(InvalidShipmentStateError):
    """Requested status is not reachable from the current one"""

    def __init__(self, message: str, current_status: Optional[str] = None, target_status: Optional[str] = None):
        super().__init__(message, current_status=current_status)
        self.target_status = target_status


class ShipmentPermissionError(PermissionDeniedError):
    """Caller may not view this shipment"""
    pass


# ============================================================================
# Repository Protocol
# ============================================================================

@runtime_checkable
class ShipmentRepositoryProtocol(Protocol):
    """
    Interface for Shipment Repository.

    Covers shipments, shipment items and the order/batch rows the
    fulfillment rules read and lock.
    """

    def transaction(self) -> AsyncContextManager[Any]:
        ...

    # Shipments
    async def list_shipments(self, filters: ShipmentFilter) -> List[Shipment]:
        """Shipments newest first, without items"""
        ...

    async def get_shipment(self, shipment_id: int, for_update: bool = False) -> Optional[Shipment]:
        """Shipment with items; ``for_update`` locks the shipment row"""
        ...

    async def create_shipment(
        self,
        order_id: int,
        shipment_code: str,
        driver_name: Optional[str] = None,
        driver_phone: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        ...

    async def update_shipment(self, shipment_id: int, fields: Dict[str, Any]) -> bool:
        ...

    async def list_order_shipment_statuses(self, order_id: int) -> List[str]:
        """Status of every shipment of an order"""
        ...

    # Orders
    async def get_order(self, order_id: int, for_update: bool = False) -> Optional[OrderRef]:
        ...

    async def update_order(self, order_id: int, fields: Dict[str, Any]) -> bool:
        ...

    async def list_order_lines(self, order_id: int) -> List[OrderLine]:
        ...

    async def get_order_line(self, order_item_id: int, for_update: bool = False) -> Optional[OrderLine]:
        ...

    async def get_shipped_quantity(self, order_item_id: int, exclude_shipment_item_id: Optional[int] = None) -> int:
        """Quantity shipped for an order line over non-cancelled shipments"""
        ...

    async def get_shipped_totals(self, order_id: int) -> Dict[int, int]:
        """Shipped quantity per order line over non-cancelled shipments"""
        ...

    # Batches
    async def get_batch(self, batch_id: int, for_update: bool = False) -> Optional[Batch]:
        ...

    async def adjust_batch_quantity(self, batch_id: int, delta: int) -> None:
        ...

    async def record_inventory_transaction(
        self,
        store_id: int,
        item_id: int,
        batch_id: int,
        quantity_change: int,
        transaction_type: str,
        shipment_id: int,
        created_by: Optional[str] = None,
        note: Optional[str] = None,
    ) -> None:
        ...

    # Shipment items
    async def list_shipment_items(self, shipment_id: int) -> List[ShipmentItem]:
        ...

    async def get_shipment_item(self, item_id: int) -> Optional[ShipmentItem]:
        ...

    async def add_shipment_item(
        self,
        shipment_id: int,
        order_item_id: int,
        batch_id: int,
        quantity_shipped: int,
        note: Optional[str] = None,
    ) -> int:
        ...

    async def update_shipment_item(self, item_id: int, fields: Dict[str, Any]) -> bool:
        ...

    # Traceability
    async def trace_batch(self, batch_id: int) -> List[BatchTraceEntry]:
        ...

    async def trace_shipment(self, shipment_id: int) -> List[BatchTraceEntry]:
        ...

    async def health_check(self) -> bool:
        ...
