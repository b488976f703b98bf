"""
Shipment Service Data Models

Pydantic models for shipments, shipment items and batch traceability.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from core.api_response import CamelModel


class ShipmentStatus(str, Enum):
    """Shipment workflow status"""
    PENDING = "pending"
    PREPARING = "preparing"
    SHIPPING = "shipping"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class FulfillmentStatus(str, Enum):
    """Aggregate of shipped versus ordered quantities for an order"""
    PROCESSING = "processing"
    PARTIALLY_FULFILLED = "partially_fulfilled"
    FULFILLED = "fulfilled"


class InventoryTransactionType(str, Enum):
    EXPORT = "export"
    RETURN = "return"


# Core Models

class ShipmentItem(CamelModel):
    id: int
    shipment_id: int
    order_item_id: int
    item_id: Optional[int] = None
    item_name: Optional[str] = None
    batch_id: Optional[int] = None
    batch_code: Optional[str] = None
    expiry_date: Optional[date] = None
    quantity_shipped: int
    note: Optional[str] = None
    created_at: Optional[datetime] = None


class Shipment(CamelModel):
    id: int
    shipment_code: str
    order_id: int
    order_code: Optional[str] = None
    store_id: Optional[int] = None
    store_name: Optional[str] = None
    status: ShipmentStatus
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    notes: Optional[str] = None
    shipped_date: Optional[datetime] = None
    delivered_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[ShipmentItem] = []


class OrderRef(CamelModel):
    """Parent order columns the shipment workflow reads and locks"""
    id: int
    store_id: int
    status: str
    order_code: Optional[str] = None
    fulfillment_status: Optional[str] = None


class OrderLine(CamelModel):
    """Order item with its ordered quantity"""
    id: int
    order_id: int
    item_id: int
    quantity_ordered: int


class Batch(CamelModel):
    id: int
    item_id: int
    batch_code: Optional[str] = None
    current_quantity: int
    expiry_date: Optional[date] = None


class BatchTraceEntry(CamelModel):
    """One shipment item drawn from a batch"""
    shipment_item_id: int
    shipment_id: int
    shipment_code: str
    shipment_status: ShipmentStatus
    order_id: int
    order_code: Optional[str] = None
    store_id: Optional[int] = None
    store_name: Optional[str] = None
    batch_id: int
    batch_code: Optional[str] = None
    item_id: Optional[int] = None
    item_name: Optional[str] = None
    expiry_date: Optional[date] = None
    quantity_shipped: int
    shipped_date: Optional[datetime] = None
    delivered_date: Optional[datetime] = None


# Request Models

class ShipmentItemCreateRequest(CamelModel):
    order_item_id: int = Field(..., gt=0)
    batch_id: int = Field(..., gt=0)
    quantity_shipped: int = Field(..., gt=0)
    note: Optional[str] = None


class ShipmentItemUpdateRequest(CamelModel):
    quantity_shipped: Optional[int] = Field(None, gt=0)
    note: Optional[str] = None


class AutoFillLine(CamelModel):
    """Batch to draw an order line's outstanding quantity from"""
    order_item_id: int = Field(..., gt=0)
    batch_id: int = Field(..., gt=0)


class ShipmentCreateRequest(CamelModel):
    order_id: int = Field(..., gt=0)
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    notes: Optional[str] = None
    items: List[ShipmentItemCreateRequest] = []
    auto_fill_items: bool = False
    auto_fill_batches: List[AutoFillLine] = []

    @model_validator(mode="after")
    def check_item_source(self):
        if self.auto_fill_items and self.items:
            raise ValueError("Provide either items or auto_fill_items, not both")
        if self.auto_fill_items and not self.auto_fill_batches:
            raise ValueError("auto_fill_items requires auto_fill_batches")
        return self


class ShipmentUpdateRequest(CamelModel):
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    notes: Optional[str] = None


class ShipmentStatusUpdateRequest(CamelModel):
    status: ShipmentStatus


class ShipmentFilter(CamelModel):
    order_id: Optional[int] = None
    status: Optional[ShipmentStatus] = None
    store_id: Optional[int] = None
    include_cancelled: bool = False
