"""
Order Repository

Data access layer for orders and order lines using PostgresClient.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from core.postgres_client import PostgresClientWrapper, build_set_clause
from .models import Order, OrderFilter, OrderHeader, OrderItem, OrderStatus

logger = logging.getLogger(__name__)

ORDER_COLUMNS = """
    o.id, o.store_id, o.order_code, o.status, o.fulfillment_status,
    o.delivery_date, o.total_amount, o.notes, o.created_by, o.confirmed_by,
    o.created_at, o.updated_at,
    s.name AS store_name, u.role AS creator_role
"""

ORDER_JOINS = """
    FROM orders o
    LEFT JOIN stores s ON s.id = o.store_id
    LEFT JOIN users u ON u.id = o.created_by
"""


class OrderRepository:
    """
    Repository for order data operations

    Handles all database operations for orders using PostgresClient.
    """

    def __init__(self, db: Optional[PostgresClientWrapper] = None):
        self.db = db or PostgresClientWrapper()
        logger.info("OrderRepository initialized with PostgresClient")

    def transaction(self):
        return self.db.transaction()

    async def list_orders(self, filters: OrderFilter) -> Tuple[List[Order], int]:
        """Page of orders (newest first) and the total match count"""
        try:
            conditions = []
            params: List[Any] = []

            if filters.store_id is not None:
                params.append(filters.store_id)
                conditions.append(f"o.store_id = ${len(params)}")
            if filters.status:
                params.append(filters.status.value)
                conditions.append(f"o.status = ${len(params)}")
            if filters.delivery_date_from:
                params.append(filters.delivery_date_from)
                conditions.append(f"o.delivery_date >= ${len(params)}")
            if filters.delivery_date_to:
                params.append(filters.delivery_date_to)
                conditions.append(f"o.delivery_date <= ${len(params)}")

            where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

            count_query = f"SELECT COUNT(*) FROM orders o {where}"
            page_query = f"""
                SELECT {ORDER_COLUMNS} {ORDER_JOINS} {where}
                ORDER BY o.created_at DESC, o.id DESC
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
            """

            async with self.db:
                total = await self.db.query_value(count_query, params)
                rows = await self.db.query(page_query, params + [filters.limit, filters.offset])

            items_by_order = await self._get_items([row["id"] for row in rows])
            orders = [self._dict_to_order(row, items_by_order.get(row["id"], [])) for row in rows]
            return orders, int(total or 0)

        except Exception as e:
            logger.error(f"Failed to list orders: {e}")
            raise

    async def get_order(self, order_id: int) -> Optional[Order]:
        """Get order by ID with its lines"""
        try:
            query = f"SELECT {ORDER_COLUMNS} {ORDER_JOINS} WHERE o.id = $1"

            async with self.db:
                row = await self.db.query_row(query, [order_id])

            if not row:
                return None

            items_by_order = await self._get_items([order_id])
            return self._dict_to_order(row, items_by_order.get(order_id, []))

        except Exception as e:
            logger.error(f"Failed to get order {order_id}: {e}")
            raise

    async def get_order_header(self, order_id: int, for_update: bool = False) -> Optional[OrderHeader]:
        try:
            query = "SELECT id, store_id, status, order_code FROM orders WHERE id = $1"
            if for_update:
                query += " FOR UPDATE"

            async with self.db:
                row = await self.db.query_row(query, [order_id])

            return OrderHeader(**row) if row else None

        except Exception as e:
            logger.error(f"Failed to get order header {order_id}: {e}")
            raise

    async def store_exists(self, store_id: int) -> bool:
        try:
            async with self.db:
                value = await self.db.query_value("SELECT 1 FROM stores WHERE id = $1", [store_id])
            return value is not None
        except Exception as e:
            logger.error(f"Failed to check store {store_id}: {e}")
            raise

    async def get_item_prices(self, item_ids: List[int]) -> Dict[int, Optional[Decimal]]:
        """Current price per item id; unknown ids are absent"""
        if not item_ids:
            return {}
        try:
            query = "SELECT id, current_price FROM items WHERE id = ANY($1::bigint[])"

            async with self.db:
                rows = await self.db.query(query, [list(set(item_ids))])

            return {row["id"]: row["current_price"] for row in rows}

        except Exception as e:
            logger.error(f"Failed to get item prices: {e}")
            raise

    async def create_order(
        self,
        store_id: int,
        order_code: str,
        created_by: str,
        delivery_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Insert a pending order with a zero total"""
        try:
            query = """
                INSERT INTO orders (
                    store_id, order_code, status, delivery_date, notes,
                    total_amount, created_by, created_at, updated_at
                ) VALUES ($1, $2, $3, $4, $5, 0, $6, NOW(), NOW())
                RETURNING id
            """

            async with self.db:
                order_id = await self.db.query_value(
                    query,
                    [store_id, order_code, OrderStatus.PENDING.value, delivery_date, notes, created_by],
                )

            logger.info(f"Created order {order_code} (id={order_id}) for store {store_id}")
            return order_id

        except Exception as e:
            logger.error(f"Failed to create order: {e}")
            raise

    async def replace_order_items(self, order_id: int, lines: List[Dict[str, Any]]) -> None:
        """Delete existing lines and insert the new ones"""
        try:
            insert = """
                INSERT INTO order_items (order_id, item_id, quantity_ordered, unit_price, notes)
                VALUES ($1, $2, $3, $4, $5)
            """

            async with self.db:
                await self.db.execute("DELETE FROM order_items WHERE order_id = $1", [order_id])
                for line in lines:
                    await self.db.execute(
                        insert,
                        [order_id, line["item_id"], line["quantity"], line["unit_price"], line.get("notes")],
                    )

        except Exception as e:
            logger.error(f"Failed to replace items of order {order_id}: {e}")
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

    async def health_check(self) -> bool:
        result = await self.db.health_check()
        return bool(result and result.get("healthy"))

    async def _get_items(self, order_ids: List[int]) -> Dict[int, List[OrderItem]]:
        if not order_ids:
            return {}
        query = """
            SELECT oi.id, oi.order_id, oi.item_id, oi.quantity_ordered, oi.unit_price,
                   oi.notes, i.name AS item_name, i.type AS item_type
            FROM order_items oi
            LEFT JOIN items i ON i.id = oi.item_id
            WHERE oi.order_id = ANY($1::bigint[])
            ORDER BY oi.id
        """

        async with self.db:
            rows = await self.db.query(query, [order_ids])

        grouped: Dict[int, List[OrderItem]] = {}
        for row in rows:
            grouped.setdefault(row["order_id"], []).append(
                OrderItem(
                    id=row["id"],
                    item_id=row["item_id"],
                    item_name=row.get("item_name"),
                    quantity=row["quantity_ordered"],
                    unit_price=row.get("unit_price"),
                    type=row.get("item_type"),
                    notes=row.get("notes"),
                )
            )
        return grouped

    def _dict_to_order(self, data: Dict[str, Any], items: List[OrderItem]) -> Order:
        """Convert row to Order model"""
        return Order(
            id=data["id"],
            store_id=data["store_id"],
            store_name=data.get("store_name"),
            order_code=data["order_code"],
            status=OrderStatus(data["status"]),
            fulfillment_status=data.get("fulfillment_status"),
            delivery_date=data.get("delivery_date"),
            total_amount=data.get("total_amount"),
            notes=data.get("notes"),
            items=items,
            created_by=str(data["created_by"]) if data.get("created_by") else None,
            creator_role=data.get("creator_role"),
            confirmed_by=str(data["confirmed_by"]) if data.get("confirmed_by") else None,
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
