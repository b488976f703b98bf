"""
Mock dependencies for Shipment Service component testing

Provides an in-memory repository implementing ShipmentRepositoryProtocol.
Quantities shipped are derived from the stored shipment items the same way
the SQL does it: items of cancelled shipments do not count.
"""
import copy
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple

from services.shipment_service.models import (
    Batch,
    BatchTraceEntry,
    OrderLine,
    OrderRef,
    Shipment,
    ShipmentFilter,
    ShipmentItem,
)

CANCELLED = "cancelled"
ROW_READS = ("get_shipment", "get_order", "get_order_line", "get_batch")


class MockShipmentRepository:
    """Mock shipment repository for component testing"""

    def __init__(self):
        self.orders: Dict[int, Dict[str, Any]] = {}
        self.order_lines: Dict[int, Dict[str, Any]] = {}
        self.batches: Dict[int, Dict[str, Any]] = {}
        self.shipments: Dict[int, Dict[str, Any]] = {}
        self.items: Dict[int, Dict[str, Any]] = {}
        self.ledger: List[Dict[str, Any]] = []
        self._next_id = {"shipment": 1, "item": 1}
        self._call_log: List[Tuple[str, Any]] = []
        self.commits = 0
        self.rollbacks = 0

    # Seeding

    def set_order(self, order_id: int, store_id: int = 1, status: str = "processing",
                  lines: Optional[List[Tuple[int, int, int]]] = None):
        """Add an order with ``(order_item_id, item_id, quantity_ordered)`` lines"""
        self.orders[order_id] = {
            "id": order_id,
            "store_id": store_id,
            "status": status,
            "order_code": f"ORD-20260101-{order_id:05d}",
            "fulfillment_status": None,
        }
        for line_id, item_id, quantity in lines or []:
            self.order_lines[line_id] = {
                "id": line_id,
                "order_id": order_id,
                "item_id": item_id,
                "quantity_ordered": quantity,
            }

    def set_batch(self, batch_id: int, item_id: int, quantity: int, batch_code: Optional[str] = None):
        self.batches[batch_id] = {
            "id": batch_id,
            "item_id": item_id,
            "batch_code": batch_code or f"B-{batch_id:03d}",
            "current_quantity": quantity,
            "expiry_date": None,
        }

    def set_shipment(self, order_id: int, status: str = "pending", **fields) -> int:
        shipment_id = self._take_id("shipment")
        self.shipments[shipment_id] = {
            "id": shipment_id,
            "shipment_code": f"SHP-20260101-{shipment_id:05d}",
            "order_id": order_id,
            "status": status,
            "driver_name": None,
            "driver_phone": None,
            "notes": None,
            "shipped_date": None,
            "delivered_date": None,
        }
        self.shipments[shipment_id].update(fields)
        return shipment_id

    def set_item(self, shipment_id: int, order_item_id: int, batch_id: int, quantity: int) -> int:
        """Store an item without touching batch stock"""
        item_id = self._take_id("item")
        self.items[item_id] = {
            "id": item_id,
            "shipment_id": shipment_id,
            "order_item_id": order_item_id,
            "batch_id": batch_id,
            "quantity_shipped": quantity,
            "note": None,
        }
        return item_id

    def _take_id(self, kind: str) -> int:
        value = self._next_id[kind]
        self._next_id[kind] += 1
        return value

    def _log(self, method: str, payload: Any = None):
        self._call_log.append((method, payload))

    def calls(self, method: str) -> List[Any]:
        return [payload for name, payload in self._call_log if name == method]

    def row_reads(self) -> List[Tuple[str, bool, bool]]:
        """``(method, for_update, inside_transaction)`` for each row read, in call order"""
        depth = 0
        reads = []
        for name, payload in self._call_log:
            if name == "transaction":
                depth += 1 if payload == "begin" else -1
            elif name in ROW_READS:
                reads.append((name, payload["for_update"], depth > 0))
        return reads

    def stock(self, batch_id: int) -> int:
        return self.batches[batch_id]["current_quantity"]

    def _state(self):
        return (self.orders, self.order_lines, self.batches, self.shipments, self.items, self.ledger)

    # Protocol

    @asynccontextmanager
    async def transaction(self):
        self._log("transaction", "begin")
        snapshot = copy.deepcopy(self._state())
        try:
            yield self
        except Exception:
            (self.orders, self.order_lines, self.batches,
             self.shipments, self.items, self.ledger) = snapshot
            self.rollbacks += 1
            self._log("transaction", "rollback")
            raise
        self.commits += 1
        self._log("transaction", "commit")

    def _to_item(self, row: Dict[str, Any]) -> ShipmentItem:
        line = self.order_lines.get(row["order_item_id"], {})
        batch = self.batches.get(row["batch_id"], {})
        return ShipmentItem(
            item_id=line.get("item_id"),
            item_name=f"Item {line.get('item_id')}",
            batch_code=batch.get("batch_code"),
            expiry_date=batch.get("expiry_date"),
            **row,
        )

    def _to_shipment(self, row: Dict[str, Any], with_items: bool = True) -> Shipment:
        order = self.orders.get(row["order_id"], {})
        items = [self._to_item(i) for i in self.items.values() if i["shipment_id"] == row["id"]] if with_items else []
        return Shipment(
            order_code=order.get("order_code"),
            store_id=order.get("store_id"),
            store_name=f"Store {order.get('store_id')}",
            items=items,
            **row,
        )

    async def list_shipments(self, filters: ShipmentFilter) -> List[Shipment]:
        self._log("list_shipments", filters)
        rows = sorted(self.shipments.values(), key=lambda r: r["id"], reverse=True)
        if filters.status:
            rows = [r for r in rows if r["status"] == filters.status.value]
        elif not filters.include_cancelled:
            rows = [r for r in rows if r["status"] != CANCELLED]
        if filters.order_id:
            rows = [r for r in rows if r["order_id"] == filters.order_id]
        if filters.store_id:
            rows = [r for r in rows if self.orders[r["order_id"]]["store_id"] == filters.store_id]
        return [self._to_shipment(r, with_items=False) for r in rows]

    async def get_shipment(self, shipment_id: int, for_update: bool = False) -> Optional[Shipment]:
        self._log("get_shipment", {"shipment_id": shipment_id, "for_update": for_update})
        row = self.shipments.get(shipment_id)
        return self._to_shipment(row) if row else None

    async def create_shipment(self, order_id, shipment_code, driver_name=None, driver_phone=None, notes=None) -> int:
        self._log("create_shipment", {"order_id": order_id, "shipment_code": shipment_code})
        return self.set_shipment(
            order_id,
            shipment_code=shipment_code,
            driver_name=driver_name,
            driver_phone=driver_phone,
            notes=notes,
        )

    async def update_shipment(self, shipment_id: int, fields: Dict[str, Any]) -> bool:
        self._log("update_shipment", {"shipment_id": shipment_id, "fields": fields})
        self.shipments[shipment_id].update(fields)
        return True

    async def list_order_shipment_statuses(self, order_id: int) -> List[str]:
        return [r["status"] for r in self.shipments.values() if r["order_id"] == order_id]

    async def get_order(self, order_id: int, for_update: bool = False) -> Optional[OrderRef]:
        self._log("get_order", {"order_id": order_id, "for_update": for_update})
        row = self.orders.get(order_id)
        return OrderRef(**row) if row else None

    async def update_order(self, order_id: int, fields: Dict[str, Any]) -> bool:
        self._log("update_order", {"order_id": order_id, "fields": fields})
        self.orders[order_id].update(fields)
        return True

    async def list_order_lines(self, order_id: int) -> List[OrderLine]:
        return [OrderLine(**r) for r in self.order_lines.values() if r["order_id"] == order_id]

    async def get_order_line(self, order_item_id: int, for_update: bool = False) -> Optional[OrderLine]:
        self._log("get_order_line", {"order_item_id": order_item_id, "for_update": for_update})
        row = self.order_lines.get(order_item_id)
        return OrderLine(**row) if row else None

    def _live_items(self):
        for item in self.items.values():
            if self.shipments[item["shipment_id"]]["status"] != CANCELLED:
                yield item

    async def get_shipped_quantity(self, order_item_id: int, exclude_shipment_item_id: Optional[int] = None) -> int:
        return sum(
            i["quantity_shipped"] for i in self._live_items()
            if i["order_item_id"] == order_item_id and i["id"] != exclude_shipment_item_id
        )

    async def get_shipped_totals(self, order_id: int) -> Dict[int, int]:
        totals: Dict[int, int] = {}
        for item in self._live_items():
            line = self.order_lines[item["order_item_id"]]
            if line["order_id"] == order_id:
                totals[line["id"]] = totals.get(line["id"], 0) + item["quantity_shipped"]
        return totals

    async def get_batch(self, batch_id: int, for_update: bool = False) -> Optional[Batch]:
        self._log("get_batch", {"batch_id": batch_id, "for_update": for_update})
        row = self.batches.get(batch_id)
        return Batch(**row) if row else None

    async def adjust_batch_quantity(self, batch_id: int, delta: int) -> None:
        self._log("adjust_batch_quantity", {"batch_id": batch_id, "delta": delta})
        self.batches[batch_id]["current_quantity"] += delta

    async def record_inventory_transaction(self, **entry) -> None:
        self.ledger.append(entry)

    async def list_shipment_items(self, shipment_id: int) -> List[ShipmentItem]:
        return [self._to_item(i) for i in self.items.values() if i["shipment_id"] == shipment_id]

    async def get_shipment_item(self, item_id: int) -> Optional[ShipmentItem]:
        row = self.items.get(item_id)
        return self._to_item(row) if row else None

    async def add_shipment_item(self, shipment_id, order_item_id, batch_id, quantity_shipped, note=None) -> int:
        self._log("add_shipment_item", {"shipment_id": shipment_id, "quantity_shipped": quantity_shipped})
        item_id = self.set_item(shipment_id, order_item_id, batch_id, quantity_shipped)
        self.items[item_id]["note"] = note
        return item_id

    async def update_shipment_item(self, item_id: int, fields: Dict[str, Any]) -> bool:
        self._log("update_shipment_item", {"item_id": item_id, "fields": fields})
        self.items[item_id].update(fields)
        return True

    def _trace(self, item: Dict[str, Any]) -> BatchTraceEntry:
        shipment = self.shipments[item["shipment_id"]]
        order = self.orders[shipment["order_id"]]
        batch = self.batches[item["batch_id"]]
        return BatchTraceEntry(
            shipment_item_id=item["id"],
            shipment_id=shipment["id"],
            shipment_code=shipment["shipment_code"],
            shipment_status=shipment["status"],
            order_id=order["id"],
            order_code=order["order_code"],
            store_id=order["store_id"],
            batch_id=batch["id"],
            batch_code=batch["batch_code"],
            item_id=batch["item_id"],
            quantity_shipped=item["quantity_shipped"],
            shipped_date=shipment["shipped_date"],
            delivered_date=shipment["delivered_date"],
        )

    async def trace_batch(self, batch_id: int) -> List[BatchTraceEntry]:
        return [self._trace(i) for i in self.items.values() if i["batch_id"] == batch_id]

    async def trace_shipment(self, shipment_id: int) -> List[BatchTraceEntry]:
        return [self._trace(i) for i in self.items.values() if i["shipment_id"] == shipment_id]

    async def health_check(self) -> bool:
        return True
