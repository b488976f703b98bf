"""
Order API Routes
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.api_response import success
from core.auth_dependencies import check_store_access, require_roles
from core.jwt_manager import AuthUser, UserRole
from services.dependencies import get_order_service

from .models import (
    OrderCreateRequest,
    OrderFilter,
    OrderStatus,
    OrderStatusUpdateRequest,
    OrderUpdateRequest,
)
from .order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def order_filters(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[OrderStatus] = Query(None),
    delivery_date_from: Optional[date] = Query(None, alias="deliveryDateFrom"),
    delivery_date_to: Optional[date] = Query(None, alias="deliveryDateTo"),
) -> OrderFilter:
    return OrderFilter(
        page=page,
        limit=limit,
        status=status,
        delivery_date_from=delivery_date_from,
        delivery_date_to=delivery_date_to,
    )


@router.get("")
async def list_orders(
    filters: OrderFilter = Depends(order_filters),
    user: AuthUser = Depends(require_roles(
        UserRole.ADMIN, UserRole.MANAGER, UserRole.CK_STAFF, UserRole.COORDINATOR
    )),
    service: OrderService = Depends(get_order_service),
):
    """List all orders, newest first"""
    return success(await service.list_orders(filters))


@router.get("/store/{store_id}")
async def list_store_orders(
    store_id: int,
    filters: OrderFilter = Depends(order_filters),
    user: AuthUser = Depends(check_store_access),
    service: OrderService = Depends(get_order_service),
):
    """List the orders of one store"""
    return success(await service.list_store_orders(store_id, filters, user))


@router.get("/{order_id}")
async def get_order(
    order_id: int,
    user: AuthUser = Depends(require_roles()),
    service: OrderService = Depends(get_order_service),
):
    return success(await service.get_order(order_id, user))


@router.post("", status_code=201)
async def create_order(
    request: OrderCreateRequest,
    user: AuthUser = Depends(require_roles()),
    service: OrderService = Depends(get_order_service),
):
    """Create an order; prices are copied from the item master"""
    return success(await service.create_order(request, user))


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: int,
    request: OrderStatusUpdateRequest,
    user: AuthUser = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER, UserRole.COORDINATOR)),
    service: OrderService = Depends(get_order_service),
):
    return success(await service.update_order_status(order_id, request, user))


@router.put("/{order_id}")
async def update_order(
    order_id: int,
    request: OrderUpdateRequest,
    user: AuthUser = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER, UserRole.STORE_STAFF)),
    service: OrderService = Depends(get_order_service),
):
    """Replace the content of a pending order"""
    return success(await service.update_order(order_id, request, user))
