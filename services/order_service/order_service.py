"""
Order Service Business Logic

Store orders: creation with price snapshots, editing while pending,
store-scoped reads and status updates.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from core.api_response import PaginationMeta
from core.code_generator import ORDER_PREFIX, generate_code
from core.jwt_manager import AuthUser

from .models import (
    Order,
    OrderCreateRequest,
    OrderFilter,
    OrderHeader,
    OrderItemRequest,
    OrderListResponse,
    OrderStatus,
    OrderStatusUpdateRequest,
    OrderUpdateRequest,
    TERMINAL_ORDER_STATUSES,
)
from .protocols import (
    InvalidOrderStateError,
    OrderNotFoundError,
    OrderPermissionError,
    OrderRepositoryProtocol,
    OrderValidationError,
)

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order management business logic service

    The repository is injected so tests can run against an in-memory double.
    """

    def __init__(self, repository: OrderRepositoryProtocol):
        self.repository = repository

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_orders(self, filters: OrderFilter) -> OrderListResponse:
        orders, total = await self.repository.list_orders(filters)
        return OrderListResponse(
            data=orders,
            meta=PaginationMeta.build(total, filters.page, filters.limit),
        )

    async def list_store_orders(self, store_id: int, filters: OrderFilter, user: AuthUser) -> OrderListResponse:
        if not user.can_access_store(store_id):
            raise OrderPermissionError("You can only access your own store")
        scoped = filters.model_copy(update={"store_id": store_id})
        return await self.list_orders(scoped)

    async def get_order(self, order_id: int, user: AuthUser) -> Order:
        order = await self.repository.get_order(order_id)
        if not order:
            raise OrderNotFoundError(f"Order #{order_id} not found")
        if not user.can_access_store(order.store_id):
            raise OrderPermissionError("You can only view orders of your own store")
        return order

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_order(self, request: OrderCreateRequest, user: AuthUser) -> Order:
        """Create a pending order, snapshotting each item's current price"""
        self._check_store_scope(request.store_id, user)

        async with self.repository.transaction():
            if not await self.repository.store_exists(request.store_id):
                raise OrderValidationError(f"Store #{request.store_id} not found", field="store_id")

            lines = await self._price_lines(request.items)
            order_code = generate_code(ORDER_PREFIX)
            order_id = await self.repository.create_order(
                store_id=request.store_id,
                order_code=order_code,
                created_by=user.id,
                delivery_date=request.delivery_date,
                notes=request.notes,
            )
            await self.repository.replace_order_items(order_id, lines)
            await self.repository.update_order(order_id, {"total_amount": self._total(lines)})

        logger.info(f"Order {order_code} created by {user.id} for store {request.store_id}")
        return await self.get_order(order_id, user)

    async def update_order(self, order_id: int, request: OrderUpdateRequest, user: AuthUser) -> Order:
        """Replace the content of a pending order"""
        async with self.repository.transaction():
            header = await self._get_header(order_id, for_update=True)

            if header.status != OrderStatus.PENDING:
                raise OrderPermissionError("Only pending orders can be edited")
            self._check_store_scope(header.store_id, user)
            if request.store_id is not None and request.store_id != header.store_id:
                raise OrderValidationError("An order cannot be moved to another store", field="store_id")

            lines = await self._price_lines(request.items)
            await self.repository.replace_order_items(order_id, lines)

            fields: Dict[str, Any] = {"total_amount": self._total(lines)}
            if request.delivery_date is not None:
                fields["delivery_date"] = request.delivery_date
            if request.notes is not None:
                fields["notes"] = request.notes
            await self.repository.update_order(order_id, fields)

        logger.info(f"Order {order_id} updated by {user.id}")
        return await self.get_order(order_id, user)

    async def update_order_status(self, order_id: int, request: OrderStatusUpdateRequest, user: AuthUser) -> Order:
        """
        Set the workflow status.

        Any status may be chosen by a permitted role; delivered and cancelled
        orders are closed.
        """
        async with self.repository.transaction():
            header = await self._get_header(order_id, for_update=True)

            if header.status != request.status:
                if header.status in TERMINAL_ORDER_STATUSES:
                    raise InvalidOrderStateError(
                        f"Order is {header.status.value} and can no longer change status",
                        current_status=header.status.value,
                    )

                fields: Dict[str, Any] = {"status": request.status.value}
                if request.status == OrderStatus.APPROVED:
                    fields["confirmed_by"] = user.id
                if request.notes is not None:
                    fields["notes"] = request.notes
                await self.repository.update_order(order_id, fields)
                logger.info(
                    f"Order {order_id} status {header.status.value} -> {request.status.value} by {user.id}"
                )
            elif request.notes is not None:
                await self.repository.update_order(order_id, {"notes": request.notes})

        return await self.get_order(order_id, user)

    async def health_check(self) -> bool:
        return await self.repository.health_check()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_header(self, order_id: int, for_update: bool = False) -> OrderHeader:
        header = await self.repository.get_order_header(order_id, for_update=for_update)
        if not header:
            raise OrderNotFoundError(f"Order #{order_id} not found")
        return header

    def _check_store_scope(self, store_id: Optional[int], user: AuthUser) -> None:
        if user.is_store_staff and user.store_id is None:
            raise OrderPermissionError("Store staff must be assigned to a store")
        if not user.can_access_store(store_id):
            raise OrderPermissionError("You can only manage orders of your own store")

    async def _price_lines(self, items: List[OrderItemRequest]) -> List[Dict[str, Any]]:
        prices = await self.repository.get_item_prices([item.item_id for item in items])
        lines = []
        for item in items:
            if item.item_id not in prices:
                raise OrderValidationError(f"Item #{item.item_id} not found", field="items")
            price = prices[item.item_id]
            if price is None:
                raise OrderValidationError(f"Item #{item.item_id} has no current price", field="items")
            lines.append({
                "item_id": item.item_id,
                "quantity": item.quantity,
                "unit_price": Decimal(str(price)),
                "notes": item.notes,
            })
        return lines

    @staticmethod
    def _total(lines: List[Dict[str, Any]]) -> Decimal:
        return sum((line["unit_price"] * line["quantity"] for line in lines), Decimal("0"))
