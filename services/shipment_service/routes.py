"""
Shipment API Routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.api_response import success
from core.auth_dependencies import require_roles
from core.jwt_manager import AuthUser, UserRole
from services.dependencies import get_shipment_service

from .models import (
    ShipmentCreateRequest,
    ShipmentFilter,
    ShipmentItemCreateRequest,
    ShipmentItemUpdateRequest,
    ShipmentStatus,
    ShipmentStatusUpdateRequest,
    ShipmentUpdateRequest,
)
from .shipment_service import ShipmentService

router = APIRouter(prefix="/shipments", tags=["shipments"])

logistics_roles = require_roles(UserRole.ADMIN, UserRole.MANAGER, UserRole.COORDINATOR)
trace_roles = require_roles(UserRole.ADMIN, UserRole.MANAGER, UserRole.CK_STAFF, UserRole.COORDINATOR)


@router.get("")
async def list_shipments(
    order_id: Optional[int] = Query(None, alias="orderId"),
    status: Optional[ShipmentStatus] = Query(None),
    include_cancelled: bool = Query(False, alias="includeCancelled"),
    user: AuthUser = Depends(require_roles()),
    service: ShipmentService = Depends(get_shipment_service),
):
    """List shipments, newest first; cancelled ones are hidden by default"""
    filters = ShipmentFilter(order_id=order_id, status=status, include_cancelled=include_cancelled)
    return success(await service.list_shipments(filters, user))


@router.get("/trace/{batch_id}")
async def trace_batch(
    batch_id: int,
    user: AuthUser = Depends(trace_roles),
    service: ShipmentService = Depends(get_shipment_service),
):
    """Where did this batch go"""
    return success(await service.trace_batch(batch_id))


@router.get("/{shipment_id}")
async def get_shipment(
    shipment_id: int,
    user: AuthUser = Depends(require_roles()),
    service: ShipmentService = Depends(get_shipment_service),
):
    return success(await service.get_shipment(shipment_id, user))


@router.get("/{shipment_id}/trace")
async def trace_shipment(
    shipment_id: int,
    user: AuthUser = Depends(trace_roles),
    service: ShipmentService = Depends(get_shipment_service),
):
    """Which batches this shipment drew from"""
    return success(await service.trace_shipment(shipment_id))


@router.post("", status_code=201)
async def create_shipment(
    request: ShipmentCreateRequest,
    user: AuthUser = Depends(logistics_roles),
    service: ShipmentService = Depends(get_shipment_service),
):
    return success(await service.create_shipment(request, user))


@router.patch("/{shipment_id}")
async def update_shipment(
    shipment_id: int,
    request: ShipmentUpdateRequest,
    user: AuthUser = Depends(logistics_roles),
    service: ShipmentService = Depends(get_shipment_service),
):
    return success(await service.update_shipment(shipment_id, request, user))


@router.put("/{shipment_id}/status")
async def update_shipment_status(
    shipment_id: int,
    request: ShipmentStatusUpdateRequest,
    user: AuthUser = Depends(logistics_roles),
    service: ShipmentService = Depends(get_shipment_service),
):
    return success(await service.update_shipment_status(shipment_id, request, user))


@router.get("/{shipment_id}/items")
async def list_shipment_items(
    shipment_id: int,
    user: AuthUser = Depends(require_roles()),
    service: ShipmentService = Depends(get_shipment_service),
):
    return success(await service.list_shipment_items(shipment_id, user))


@router.post("/{shipment_id}/items", status_code=201)
async def add_shipment_item(
    shipment_id: int,
    request: ShipmentItemCreateRequest,
    user: AuthUser = Depends(logistics_roles),
    service: ShipmentService = Depends(get_shipment_service),
):
    return success(await service.add_shipment_item(shipment_id, request, user))


@router.patch("/{shipment_id}/items/{item_id}")
async def update_shipment_item(
    shipment_id: int,
    item_id: int,
    request: ShipmentItemUpdateRequest,
    user: AuthUser = Depends(logistics_roles),
    service: ShipmentService = Depends(get_shipment_service),
):
    return success(await service.update_shipment_item(shipment_id, item_id, request, user))
