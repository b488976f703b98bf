"""
Shipment workflow and order fulfillment rules

Pure functions over plain values; the shipment service applies them inside
a database transaction.
"""

from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from .models import FulfillmentStatus, ShipmentStatus


SHIPMENT_TRANSITIONS: Dict[ShipmentStatus, Tuple[ShipmentStatus, ...]] = {
    ShipmentStatus.PENDING: (ShipmentStatus.PREPARING, ShipmentStatus.CANCELLED),
    ShipmentStatus.PREPARING: (ShipmentStatus.SHIPPING, ShipmentStatus.CANCELLED),
    ShipmentStatus.SHIPPING: (ShipmentStatus.DELIVERED,),
    ShipmentStatus.DELIVERED: (),
    ShipmentStatus.CANCELLED: (),
}

# Items can be added or edited until the truck leaves
EDITABLE_SHIPMENT_STATUSES = (ShipmentStatus.PENDING, ShipmentStatus.PREPARING)

CLOSED_SHIPMENT_STATUSES = (ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED)


def can_transition(current: ShipmentStatus, target: ShipmentStatus) -> bool:
    return target in SHIPMENT_TRANSITIONS.get(current, ())


def allowed_transitions(current: ShipmentStatus) -> Tuple[ShipmentStatus, ...]:
    return SHIPMENT_TRANSITIONS.get(current, ())


def transition_updates(target: ShipmentStatus, now: datetime) -> Dict[str, Optional[datetime]]:
    """Column updates that accompany entering ``target``"""
    updates: Dict[str, Optional[datetime]] = {"status": target.value}
    if target == ShipmentStatus.SHIPPING:
        updates["shipped_date"] = now
    elif target == ShipmentStatus.DELIVERED:
        updates["delivered_date"] = now
    elif target == ShipmentStatus.CANCELLED:
        updates["shipped_date"] = None
        updates["delivered_date"] = None
    return updates


def compute_fulfillment_status(lines: Iterable[Tuple[int, int]]) -> FulfillmentStatus:
    """
    Aggregate fulfillment from (quantity_ordered, quantity_shipped) pairs.

    ``quantity_shipped`` must already exclude cancelled shipments. The result
    does not depend on the order of the pairs.
    """
    lines = list(lines)
    if lines and all(shipped >= ordered for ordered, shipped in lines):
        return FulfillmentStatus.FULFILLED
    if any(shipped > 0 for _, shipped in lines):
        return FulfillmentStatus.PARTIALLY_FULFILLED
    return FulfillmentStatus.PROCESSING


def check_batch_stock(available: int, requested: int) -> Optional[str]:
    """Return a rejection reason when the batch cannot cover ``requested``"""
    if available < requested:
        return f"Insufficient batch stock: requested {requested}, available {available}"
    return None


def check_order_item_quantity(quantity_ordered: int, already_shipped: int, requested: int) -> Optional[str]:
    """Return a rejection reason when shipping ``requested`` would exceed the order line"""
    if already_shipped + requested > quantity_ordered:
        remaining = max(quantity_ordered - already_shipped, 0)
        return (
            f"Exceeds ordered quantity: ordered {quantity_ordered}, "
            f"already shipped {already_shipped}, remaining {remaining}"
        )
    return None
