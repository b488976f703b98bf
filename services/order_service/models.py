"""
Order Service Data Models

Pydantic models for store orders and their line items.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from core.api_response import CamelModel, PaginationMeta


class OrderStatus(str, Enum):
    """Order workflow status"""
    PENDING = "pending"
    APPROVED = "approved"
    PROCESSING = "processing"
    PROCESSED = "processed"
    SHIPPING = "shipping"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TERMINAL_ORDER_STATUSES = (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


# Core Order Models

class OrderItem(CamelModel):
    """Order line with the price captured when the order was written"""
    id: int
    item_id: int
    item_name: Optional[str] = None
    quantity: int
    unit_price: Optional[float] = None
    type: Optional[str] = None
    notes: Optional[str] = None


class Order(CamelModel):
    """Store order"""
    id: int
    store_id: int
    store_name: Optional[str] = None
    order_code: str
    status: OrderStatus
    fulfillment_status: Optional[str] = None
    delivery_date: Optional[date] = None
    total_amount: Optional[float] = None
    notes: Optional[str] = None
    items: List[OrderItem] = []
    created_by: Optional[str] = None
    creator_role: Optional[str] = None
    confirmed_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderHeader(CamelModel):
    """Order columns needed for permission and state checks"""
    id: int
    store_id: int
    status: OrderStatus
    order_code: Optional[str] = None


# Request Models

class OrderItemRequest(CamelModel):
    item_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    notes: Optional[str] = None


class OrderCreateRequest(CamelModel):
    store_id: int = Field(..., gt=0)
    delivery_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[OrderItemRequest]

    @field_validator('items')
    @classmethod
    def validate_items(cls, v):
        if not v:
            raise ValueError('Order must contain at least one item')
        return v


class OrderUpdateRequest(OrderCreateRequest):
    """Full replacement of a pending order's content"""
    store_id: Optional[int] = Field(None, gt=0)


class OrderStatusUpdateRequest(CamelModel):
    status: OrderStatus
    notes: Optional[str] = None


class OrderFilter(CamelModel):
    """Listing filters, already validated by the route layer"""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    status: Optional[OrderStatus] = None
    store_id: Optional[int] = None
    delivery_date_from: Optional[date] = None
    delivery_date_to: Optional[date] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


# Response Models

class OrderListResponse(CamelModel):
    data: List[Order]
    meta: PaginationMeta
