"""
Shipment Service Business Logic

Shipments fulfil one order's lines from inventory batches. Every write runs
in a single transaction that locks the rows it checks (shipment, order,
order line, batch, in that order), so the quantity guard and the order's
fulfillment status stay consistent under concurrent requests.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from core.code_generator import SHIPMENT_PREFIX, generate_code
from core.jwt_manager import AuthUser
from services.order_service.models import OrderStatus, TERMINAL_ORDER_STATUSES

from .fulfillment import (
    CLOSED_SHIPMENT_STATUSES,
    EDITABLE_SHIPMENT_STATUSES,
    can_transition,
    check_batch_stock,
    check_order_item_quantity,
    compute_fulfillment_status,
    transition_updates,
)
from .models import (
    AutoFillLine,
    BatchTraceEntry,
    FulfillmentStatus,
    InventoryTransactionType,
    OrderRef,
    Shipment,
    ShipmentCreateRequest,
    ShipmentFilter,
    ShipmentItem,
    ShipmentItemCreateRequest,
    ShipmentItemUpdateRequest,
    ShipmentStatus,
    ShipmentStatusUpdateRequest,
    ShipmentUpdateRequest,
)
from .protocols import (
    InsufficientStockError,
    InvalidShipmentStateError,
    InvalidShipmentTransitionError,
    QuantityExceededError,
    ShipmentNotFoundError,
    ShipmentPermissionError,
    ShipmentRepositoryProtocol,
    ShipmentValidationError,
)

logger = logging.getLogger(__name__)


class ShipmentService:
    """
    Shipment management business logic service

    Args:
        repository: shipment repository (injected)
        central_kitchen_store_id: store that owns batch stock; when set,
            every stock movement is also written to the inventory ledger
    """

    def __init__(
        self,
        repository: ShipmentRepositoryProtocol,
        central_kitchen_store_id: Optional[int] = None,
    ):
        self.repository = repository
        self.central_kitchen_store_id = central_kitchen_store_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_shipments(self, filters: ShipmentFilter, user: AuthUser) -> List[Shipment]:
        if user.is_store_staff:
            if user.store_id is None:
                raise ShipmentPermissionError("Store staff must be assigned to a store")
            filters = filters.model_copy(update={"store_id": user.store_id})
        return await self.repository.list_shipments(filters)

    async def get_shipment(self, shipment_id: int, user: AuthUser) -> Shipment:
        shipment = await self.repository.get_shipment(shipment_id)
        if not shipment:
            raise ShipmentNotFoundError(f"Shipment #{shipment_id} not found")
        if not user.can_access_store(shipment.store_id):
            raise ShipmentPermissionError("You can only view shipments of your own store")
        return shipment

    async def list_shipment_items(self, shipment_id: int, user: AuthUser) -> List[ShipmentItem]:
        await self.get_shipment(shipment_id, user)
        return await self.repository.list_shipment_items(shipment_id)

    async def trace_batch(self, batch_id: int) -> List[BatchTraceEntry]:
        """Every shipment item drawn from a batch"""
        if not await self.repository.get_batch(batch_id):
            raise ShipmentNotFoundError(f"Batch #{batch_id} not found")
        return await self.repository.trace_batch(batch_id)

    async def trace_shipment(self, shipment_id: int) -> List[BatchTraceEntry]:
        """Every batch a shipment drew from"""
        if not await self.repository.get_shipment(shipment_id):
            raise ShipmentNotFoundError(f"Shipment #{shipment_id} not found")
        return await self.repository.trace_shipment(shipment_id)

    # ------------------------------------------------------------------
    # Shipments
    # ------------------------------------------------------------------

    async def create_shipment(self, request: ShipmentCreateRequest, user: AuthUser) -> Shipment:
        """Create a shipment for a processing order, optionally with items"""
        async with self.repository.transaction():
            order = await self._get_order(request.order_id)
            if order.status != OrderStatus.PROCESSING.value:
                raise InvalidShipmentStateError(
                    "Only processing orders can be shipped", current_status=order.status
                )

            shipment_code = generate_code(SHIPMENT_PREFIX)
            shipment_id = await self.repository.create_shipment(
                order_id=order.id,
                shipment_code=shipment_code,
                driver_name=request.driver_name,
                driver_phone=request.driver_phone,
                notes=request.notes,
            )

            if request.auto_fill_items:
                items = await self._outstanding_items(order, request.auto_fill_batches)
            else:
                items = request.items
            for item in items:
                await self._add_item(shipment_id, order, item, user)

            await self._reconcile(order.id)

        logger.info(f"Shipment {shipment_code} created for order {order.id} with {len(items)} item(s)")
        return await self.get_shipment(shipment_id, user)

    async def update_shipment(self, shipment_id: int, request: ShipmentUpdateRequest, user: AuthUser) -> Shipment:
        """Edit driver details and notes of an open shipment"""
        async with self.repository.transaction():
            shipment = await self._get_shipment_for_update(shipment_id)
            if shipment.status in CLOSED_SHIPMENT_STATUSES:
                raise InvalidShipmentStateError(
                    f"Cannot edit a {shipment.status.value} shipment", current_status=shipment.status.value
                )
            await self._get_order(shipment.order_id)

            fields = request.model_dump(exclude_unset=True)
            if fields:
                await self.repository.update_shipment(shipment_id, fields)
            await self._reconcile(shipment.order_id)

        return await self.get_shipment(shipment_id, user)

    async def update_shipment_status(
        self, shipment_id: int, request: ShipmentStatusUpdateRequest, user: AuthUser
    ) -> Shipment:
        """
        Move a shipment along its workflow.

        Cancelling returns the shipped quantities to their batches; delivering
        the last open shipment of a fulfilled order delivers the order.
        """
        target = request.status
        async with self.repository.transaction():
            shipment = await self._get_shipment_for_update(shipment_id)
            current = shipment.status
            if not can_transition(current, target):
                raise InvalidShipmentTransitionError(
                    f"Cannot transition shipment from '{current.value}' to '{target.value}'",
                    current_status=current.value,
                    target_status=target.value,
                )

            order = await self._get_order(shipment.order_id)
            await self.repository.update_shipment(
                shipment_id, transition_updates(target, datetime.now(timezone.utc))
            )

            if target == ShipmentStatus.CANCELLED:
                for item in shipment.items:
                    if item.batch_id is not None:
                        await self._move_stock(
                            item.batch_id, item.item_id, item.quantity_shipped,
                            InventoryTransactionType.RETURN, shipment_id, user,
                        )

            fulfillment = await self._reconcile(order.id)
            if target == ShipmentStatus.DELIVERED:
                await self._cascade_delivery(order, fulfillment)

        logger.info(f"Shipment {shipment_id} status {current.value} -> {target.value} by {user.id}")
        return await self.get_shipment(shipment_id, user)

    # ------------------------------------------------------------------
    # Shipment items
    # ------------------------------------------------------------------

    async def add_shipment_item(
        self, shipment_id: int, request: ShipmentItemCreateRequest, user: AuthUser
    ) -> ShipmentItem:
        async with self.repository.transaction():
            shipment = await self._get_editable_shipment(shipment_id)
            order = await self._get_order(shipment.order_id)
            item_id = await self._add_item(shipment_id, order, request, user)
            await self._reconcile(order.id)

        return await self.repository.get_shipment_item(item_id)

    async def update_shipment_item(
        self, shipment_id: int, item_id: int, request: ShipmentItemUpdateRequest, user: AuthUser
    ) -> ShipmentItem:
        """Change the shipped quantity or note of an item on an open shipment"""
        async with self.repository.transaction():
            shipment = await self._get_editable_shipment(shipment_id)
            item = await self.repository.get_shipment_item(item_id)
            if not item or item.shipment_id != shipment_id:
                raise ShipmentNotFoundError(f"Shipment item #{item_id} not found in shipment #{shipment_id}")
            await self._get_order(shipment.order_id)

            fields: Dict[str, object] = {}
            delta = 0
            new_quantity = request.quantity_shipped
            if new_quantity is not None and new_quantity != item.quantity_shipped:
                line = await self.repository.get_order_line(item.order_item_id, for_update=True)
                if not line:
                    raise ShipmentNotFoundError(f"Order item #{item.order_item_id} not found")
                delta = new_quantity - item.quantity_shipped

                if item.batch_id is not None and delta > 0:
                    batch = await self.repository.get_batch(item.batch_id, for_update=True)
                    if not batch:
                        raise ShipmentNotFoundError(f"Batch #{item.batch_id} not found")
                    reason = check_batch_stock(batch.current_quantity, delta)
                    if reason:
                        raise InsufficientStockError(reason, field="quantity_shipped")

                shipped = await self.repository.get_shipped_quantity(line.id, exclude_shipment_item_id=item.id)
                reason = check_order_item_quantity(line.quantity_ordered, shipped, new_quantity)
                if reason:
                    raise QuantityExceededError(reason, field="quantity_shipped")
                fields["quantity_shipped"] = new_quantity

            if request.note is not None:
                fields["note"] = request.note

            if fields:
                await self.repository.update_shipment_item(item_id, fields)
            if delta and item.batch_id is not None:
                await self._move_stock(
                    item.batch_id, item.item_id, -delta,
                    InventoryTransactionType.EXPORT if delta > 0 else InventoryTransactionType.RETURN,
                    shipment_id, user,
                )
            await self._reconcile(shipment.order_id)

        return await self.repository.get_shipment_item(item_id)

    async def health_check(self) -> bool:
        return await self.repository.health_check()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_shipment_for_update(self, shipment_id: int) -> Shipment:
        shipment = await self.repository.get_shipment(shipment_id, for_update=True)
        if not shipment:
            raise ShipmentNotFoundError(f"Shipment #{shipment_id} not found")
        return shipment

    async def _get_editable_shipment(self, shipment_id: int) -> Shipment:
        shipment = await self._get_shipment_for_update(shipment_id)
        if shipment.status not in EDITABLE_SHIPMENT_STATUSES:
            raise InvalidShipmentStateError(
                f"Items cannot be changed once a shipment is {shipment.status.value}",
                current_status=shipment.status.value,
            )
        return shipment

    async def _get_order(self, order_id: int) -> OrderRef:
        order = await self.repository.get_order(order_id, for_update=True)
        if not order:
            raise ShipmentNotFoundError(f"Order #{order_id} not found")
        return order

    async def _add_item(
        self, shipment_id: int, order: OrderRef, request: ShipmentItemCreateRequest, user: AuthUser
    ) -> int:
        """Apply the quantity guard, insert the item and take the stock"""
        line = await self.repository.get_order_line(request.order_item_id, for_update=True)
        if not line or line.order_id != order.id:
            raise ShipmentValidationError(
                f"Order item #{request.order_item_id} does not belong to order #{order.id}",
                field="order_item_id",
            )

        batch = await self.repository.get_batch(request.batch_id, for_update=True)
        if not batch:
            raise ShipmentNotFoundError(f"Batch #{request.batch_id} not found")
        if batch.item_id != line.item_id:
            raise ShipmentValidationError(
                f"Batch #{batch.id} does not hold item #{line.item_id}", field="batch_id"
            )

        reason = check_batch_stock(batch.current_quantity, request.quantity_shipped)
        if reason:
            raise InsufficientStockError(reason, field="quantity_shipped")

        shipped = await self.repository.get_shipped_quantity(line.id)
        reason = check_order_item_quantity(line.quantity_ordered, shipped, request.quantity_shipped)
        if reason:
            raise QuantityExceededError(reason, field="quantity_shipped")

        item_id = await self.repository.add_shipment_item(
            shipment_id=shipment_id,
            order_item_id=line.id,
            batch_id=batch.id,
            quantity_shipped=request.quantity_shipped,
            note=request.note,
        )
        await self._move_stock(
            batch.id, batch.item_id, -request.quantity_shipped,
            InventoryTransactionType.EXPORT, shipment_id, user,
        )
        return item_id

    async def _outstanding_items(
        self, order: OrderRef, batches: List[AutoFillLine]
    ) -> List[ShipmentItemCreateRequest]:
        """One item per order line for whatever is still unshipped"""
        batch_by_line = {line.order_item_id: line.batch_id for line in batches}
        lines = await self.repository.list_order_lines(order.id)
        shipped = await self.repository.get_shipped_totals(order.id)

        items = []
        for line in lines:
            remaining = line.quantity_ordered - shipped.get(line.id, 0)
            if remaining <= 0:
                continue
            if line.id not in batch_by_line:
                raise ShipmentValidationError(
                    f"No batch given for order item #{line.id}", field="auto_fill_batches"
                )
            items.append(ShipmentItemCreateRequest(
                order_item_id=line.id,
                batch_id=batch_by_line[line.id],
                quantity_shipped=remaining,
            ))
        return items

    async def _move_stock(
        self,
        batch_id: int,
        item_id: Optional[int],
        delta: int,
        transaction_type: InventoryTransactionType,
        shipment_id: int,
        user: AuthUser,
    ) -> None:
        await self.repository.adjust_batch_quantity(batch_id, delta)
        if self.central_kitchen_store_id is not None and item_id is not None:
            await self.repository.record_inventory_transaction(
                store_id=self.central_kitchen_store_id,
                item_id=item_id,
                batch_id=batch_id,
                quantity_change=delta,
                transaction_type=transaction_type.value,
                shipment_id=shipment_id,
                created_by=user.id,
            )

    async def _reconcile(self, order_id: int) -> FulfillmentStatus:
        """Recompute and store the order's fulfillment status"""
        lines = await self.repository.list_order_lines(order_id)
        shipped = await self.repository.get_shipped_totals(order_id)
        status = compute_fulfillment_status(
            (line.quantity_ordered, shipped.get(line.id, 0)) for line in lines
        )
        await self.repository.update_order(order_id, {"fulfillment_status": status.value})
        logger.debug(f"Order {order_id} fulfillment: {status.value}")
        return status

    async def _cascade_delivery(self, order: OrderRef, fulfillment: FulfillmentStatus) -> None:
        if fulfillment != FulfillmentStatus.FULFILLED:
            return
        if order.status in [s.value for s in TERMINAL_ORDER_STATUSES]:
            return
        statuses = await self.repository.list_order_shipment_statuses(order.id)
        open_statuses = [s for s in statuses if s != ShipmentStatus.CANCELLED.value]
        if open_statuses and all(s == ShipmentStatus.DELIVERED.value for s in open_statuses):
            await self.repository.update_order(order.id, {"status": OrderStatus.DELIVERED.value})
            logger.info(f"Order {order.id} delivered: all shipments delivered")
