"""
Shipment Repository

Data access layer for shipments, shipment items and the order and batch
rows the fulfillment rules read and lock.
"""

import logging
from typing import Any, Dict, List, Optional

from core.postgres_client import PostgresClientWrapper, build_set_clause
from .models import (
    Batch,
    BatchTraceEntry,
    OrderLine,
    OrderRef,
    Shipment,
    ShipmentFilter,
    ShipmentItem,
    ShipmentStatus,
)

logger = logging.getLogger(__name__)

SHIPMENT_SELECT = """
    SELECT sh.id, sh.shipment_code, sh.order_id, sh.status, sh.driver_name,
           sh.driver_phone, sh.notes, sh.shipped_date, sh.delivered_date,
           sh.created_at, sh.updated_at,
           o.order_code, o.store_id, st.name AS store_name
    FROM shipments sh
    JOIN orders o ON o.id = sh.order_id
    LEFT JOIN stores st ON st.id = o.store_id
"""

ITEM_SELECT = """
    SELECT si.id, si.shipment_id, si.order_item_id, si.batch_id,
           si.quantity_shipped, si.note, si.created_at,
           oi.item_id, i.name AS item_name, b.batch_code, b.expiry_date
    FROM shipment_items si
    JOIN order_items oi ON oi.id = si.order_item_id
    LEFT JOIN items i ON i.id = oi.item_id
    LEFT JOIN batches b ON b.id = si.batch_id
"""

TRACE_SELECT = """
    SELECT si.id AS shipment_item_id, si.shipment_id, sh.shipment_code,
           sh.status AS shipment_status, sh.order_id, o.order_code, o.store_id,
           st.name AS store_name, si.batch_id, b.batch_code, oi.item_id,
           i.name AS item_name, b.expiry_date, si.quantity_shipped,
           sh.shipped_date, sh.delivered_date
    FROM shipment_items si
    JOIN shipments sh ON sh.id = si.shipment_id
    JOIN orders o ON o.id = sh.order_id
    LEFT JOIN stores st ON st.id = o.store_id
    JOIN order_items oi ON oi.id = si.order_item_id
    LEFT JOIN items i ON i.id = oi.item_id
    JOIN batches b ON b.id = si.batch_id
"""


class ShipmentRepository:
    """
    Repository for shipment data operations

    Handles all database operations for shipments using PostgresClient.
    """

    def __init__(self, db: Optional[PostgresClientWrapper] = None):
        self.db = db or PostgresClientWrapper()
        logger.info("ShipmentRepository initialized with PostgresClient")

    def transaction(self):
        return self.db.transaction()

    # ------------------------------------------------------------------
    # Shipments
    # ------------------------------------------------------------------

    async def list_shipments(self, filters: ShipmentFilter) -> List[Shipment]:
        try:
            conditions = []
            params: List[Any] = []

            if not filters.include_cancelled and filters.status != ShipmentStatus.CANCELLED:
                params.append(ShipmentStatus.CANCELLED.value)
                conditions.append(f"sh.status <> ${len(params)}")
            if filters.status:
                params.append(filters.status.value)
                conditions.append(f"sh.status = ${len(params)}")
            if filters.order_id is not None:
                params.append(filters.order_id)
                conditions.append(f"sh.order_id = ${len(params)}")
            if filters.store_id is not None:
                params.append(filters.store_id)
                conditions.append(f"o.store_id = ${len(params)}")

            where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
            query = f"{SHIPMENT_SELECT} {where} ORDER BY sh.id DESC"

            async with self.db:
                rows = await self.db.query(query, params)

            return [self._dict_to_shipment(row) for row in rows]

        except Exception as e:
            logger.error(f"Failed to list shipments: {e}")
            raise

    async def get_shipment(self, shipment_id: int, for_update: bool = False) -> Optional[Shipment]:
        try:
            query = f"{SHIPMENT_SELECT} WHERE sh.id = $1"
            if for_update:
                query += " FOR UPDATE OF sh"

            async with self.db:
                row = await self.db.query_row(query, [shipment_id])

            if not row:
                return None
            return self._dict_to_shipment(row, await self.list_shipment_items(shipment_id))

        except Exception as e:
            logger.error(f"Failed to get shipment {shipment_id}: {e}")
            raise

    async def create_shipment(
        self,
        order_id: int,
        shipment_code: str,
        driver_name: Optional[str] = None,
        driver_phone: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        try:
            query = """
                INSERT INTO shipments (
                    shipment_code, order_id, status, driver_name, driver_phone,
                    notes, created_at, updated_at
                ) VALUES ($1, $2, $3, $4, $5, $6, NOW(), NOW())
                RETURNING id
            """

            async with self.db:
                shipment_id = await self.db.query_value(
                    query,
                    [shipment_code, order_id, ShipmentStatus.PENDING.value, driver_name, driver_phone, notes],
                )

            logger.info(f"Created shipment {shipment_code} (id={shipment_id}) for order {order_id}")
            return shipment_id

        except Exception as e:
            logger.error(f"Failed to create shipment for order {order_id}: {e}")
            raise

    async def update_shipment(self, shipment_id: int, fields: Dict[str, Any]) -> bool:
        try:
            clause, params = build_set_clause(fields)
            query = f"UPDATE shipments SET {clause}, updated_at = NOW() WHERE id = ${len(params) + 1}"

            async with self.db:
                count = await self.db.execute(query, params + [shipment_id])

            return count > 0

        except Exception as e:
            logger.error(f"Failed to update shipment {shipment_id}: {e}")
            raise

    async def list_order_shipment_statuses(self, order_id: int) -> List[str]:
        try:
            async with self.db:
                rows = await self.db.query("SELECT status FROM shipments WHERE order_id = $1", [order_id])
            return [row["status"] for row in rows]
        except Exception as e:
            logger.error(f"Failed to list shipment statuses of order {order_id}: {e}")
            raise

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def get_order(self, order_id: int, for_update: bool = False) -> Optional[OrderRef]:
        try:
            query = "SELECT id, store_id, status, order_code, fulfillment_status FROM orders WHERE id = $1"
            if for_update:
                query += " FOR UPDATE"

            async with self.db:
                row = await self.db.query_row(query, [order_id])

            return OrderRef(**row) if row else None

        except Exception as e:
            logger.error(f"Failed to get order {order_id}: {e}")
            raise

    async def update_order(self, order_id: int, fields: Dict[str, Any]) -> bool:
        try:
            clause, params = build_set_clause(fields)
            query = f"UPDATE orders SET {clause}, updated_at = NOW() WHERE id = ${len(params) + 1}"

            async with self.db:
                count = await self.db.execute(query, params + [order_id])

            return count > 0

        except Exception as e:
            logger.error(f"Failed to update order {order_id}: {e}")
            raise

    async def list_order_lines(self, order_id: int) -> List[OrderLine]:
        try:
            query = """
                SELECT id, order_id, item_id, quantity_ordered
                FROM order_items WHERE order_id = $1 ORDER BY id
            """
            async with self.db:
                rows = await self.db.query(query, [order_id])
            return [OrderLine(**row) for row in rows]
        except Exception as e:
            logger.error(f"Failed to list lines of order {order_id}: {e}")
            raise

    async def get_order_line(self, order_item_id: int, for_update: bool = False) -> Optional[OrderLine]:
        try:
            query = "SELECT id, order_id, item_id, quantity_ordered FROM order_items WHERE id = $1"
            if for_update:
                query += " FOR UPDATE"

            async with self.db:
                row = await self.db.query_row(query, [order_item_id])

            return OrderLine(**row) if row else None

        except Exception as e:
            logger.error(f"Failed to get order item {order_item_id}: {e}")
            raise

    async def get_shipped_quantity(self, order_item_id: int, exclude_shipment_item_id: Optional[int] = None) -> int:
        """Quantity shipped for an order line over non-cancelled shipments"""
        try:
            query = """
                SELECT COALESCE(SUM(si.quantity_shipped), 0)
                FROM shipment_items si
                JOIN shipments sh ON sh.id = si.shipment_id
                WHERE si.order_item_id = $1 AND sh.status <> $2
            """
            params: List[Any] = [order_item_id, ShipmentStatus.CANCELLED.value]
            if exclude_shipment_item_id is not None:
                query += " AND si.id <> $3"
                params.append(exclude_shipment_item_id)

            async with self.db:
                total = await self.db.query_value(query, params)

            return int(total or 0)

        except Exception as e:
            logger.error(f"Failed to sum shipped quantity of order item {order_item_id}: {e}")
            raise

    async def get_shipped_totals(self, order_id: int) -> Dict[int, int]:
        """Shipped quantity per order line over non-cancelled shipments"""
        try:
            query = """
                SELECT si.order_item_id, COALESCE(SUM(si.quantity_shipped), 0) AS shipped
                FROM shipment_items si
                JOIN shipments sh ON sh.id = si.shipment_id
                JOIN order_items oi ON oi.id = si.order_item_id
                WHERE oi.order_id = $1 AND sh.status <> $2
                GROUP BY si.order_item_id
            """
            async with self.db:
                rows = await self.db.query(query, [order_id, ShipmentStatus.CANCELLED.value])
            return {row["order_item_id"]: int(row["shipped"]) for row in rows}
        except Exception as e:
            logger.error(f"Failed to sum shipped quantities of order {order_id}: {e}")
            raise

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    async def get_batch(self, batch_id: int, for_update: bool = False) -> Optional[Batch]:
        try:
            query = "SELECT id, item_id, batch_code, current_quantity, expiry_date FROM batches WHERE id = $1"
            if for_update:
                query += " FOR UPDATE"

            async with self.db:
                row = await self.db.query_row(query, [batch_id])

            return Batch(**row) if row else None

        except Exception as e:
            logger.error(f"Failed to get batch {batch_id}: {e}")
            raise

    async def adjust_batch_quantity(self, batch_id: int, delta: int) -> None:
        try:
            async with self.db:
                await self.db.execute(
                    "UPDATE batches SET current_quantity = current_quantity + $1 WHERE id = $2",
                    [delta, batch_id],
                )
        except Exception as e:
            logger.error(f"Failed to adjust batch {batch_id} by {delta}: {e}")
            raise

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
        try:
            query = """
                INSERT INTO inventory_transactions (
                    store_id, item_id, batch_id, quantity_change, transaction_type,
                    reference_type, reference_id, created_by, note, created_at
                ) VALUES ($1, $2, $3, $4, $5, 'shipment', $6, $7, $8, NOW())
            """
            async with self.db:
                await self.db.execute(
                    query,
                    [store_id, item_id, batch_id, quantity_change, transaction_type, shipment_id, created_by, note],
                )
        except Exception as e:
            logger.error(f"Failed to record inventory transaction for shipment {shipment_id}: {e}")
            raise

    # ------------------------------------------------------------------
    # Shipment items
    # ------------------------------------------------------------------

    async def list_shipment_items(self, shipment_id: int) -> List[ShipmentItem]:
        try:
            query = f"{ITEM_SELECT} WHERE si.shipment_id = $1 ORDER BY si.id"
            async with self.db:
                rows = await self.db.query(query, [shipment_id])
            return [ShipmentItem(**row) for row in rows]
        except Exception as e:
            logger.error(f"Failed to list items of shipment {shipment_id}: {e}")
            raise

    async def get_shipment_item(self, item_id: int) -> Optional[ShipmentItem]:
        try:
            query = f"{ITEM_SELECT} WHERE si.id = $1"
            async with self.db:
                row = await self.db.query_row(query, [item_id])
            return ShipmentItem(**row) if row else None
        except Exception as e:
            logger.error(f"Failed to get shipment item {item_id}: {e}")
            raise

    async def add_shipment_item(
        self,
        shipment_id: int,
        order_item_id: int,
        batch_id: int,
        quantity_shipped: int,
        note: Optional[str] = None,
    ) -> int:
        try:
            query = """
                INSERT INTO shipment_items (
                    shipment_id, order_item_id, batch_id, quantity_shipped, note, created_at
                ) VALUES ($1, $2, $3, $4, $5, NOW())
                RETURNING id
            """
            async with self.db:
                return await self.db.query_value(
                    query, [shipment_id, order_item_id, batch_id, quantity_shipped, note]
                )
        except Exception as e:
            logger.error(f"Failed to add item to shipment {shipment_id}: {e}")
            raise

    async def update_shipment_item(self, item_id: int, fields: Dict[str, Any]) -> bool:
        try:
            clause, params = build_set_clause(fields)
            query = f"UPDATE shipment_items SET {clause} WHERE id = ${len(params) + 1}"

            async with self.db:
                count = await self.db.execute(query, params + [item_id])

            return count > 0

        except Exception as e:
            logger.error(f"Failed to update shipment item {item_id}: {e}")
            raise

    # ------------------------------------------------------------------
    # Traceability
    # ------------------------------------------------------------------

    async def trace_batch(self, batch_id: int) -> List[BatchTraceEntry]:
        try:
            query = f"{TRACE_SELECT} WHERE si.batch_id = $1 ORDER BY sh.id DESC, si.id"
            async with self.db:
                rows = await self.db.query(query, [batch_id])
            return [BatchTraceEntry(**row) for row in rows]
        except Exception as e:
            logger.error(f"Failed to trace batch {batch_id}: {e}")
            raise

    async def trace_shipment(self, shipment_id: int) -> List[BatchTraceEntry]:
        try:
            query = f"{TRACE_SELECT} WHERE si.shipment_id = $1 ORDER BY si.id"
            async with self.db:
                rows = await self.db.query(query, [shipment_id])
            return [BatchTraceEntry(**row) for row in rows]
        except Exception as e:
            logger.error(f"Failed to trace shipment {shipment_id}: {e}")
            raise

    async def health_check(self) -> bool:
        result = await self.db.health_check()
        return bool(result and result.get("healthy"))

    def _dict_to_shipment(self, data: Dict[str, Any], items: Optional[List[ShipmentItem]] = None) -> Shipment:
        """Convert row to Shipment model"""
        return Shipment(
            id=data["id"],
            shipment_code=data["shipment_code"],
            order_id=data["order_id"],
            order_code=data.get("order_code"),
            store_id=data.get("store_id"),
            store_name=data.get("store_name"),
            status=ShipmentStatus(data["status"]),
            driver_name=data.get("driver_name"),
            driver_phone=data.get("driver_phone"),
            notes=data.get("notes"),
            shipped_date=data.get("shipped_date"),
            delivered_date=data.get("delivered_date"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            items=items or [],
        )
