"""
Store API Routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.api_response import success
from core.auth_dependencies import require_roles
from core.jwt_manager import AuthUser, UserRole
from services.dependencies import get_store_service

from .models import StoreCreateRequest, StoreFilter, StoreType, StoreUpdateRequest
from .store_service import StoreService

router = APIRouter(prefix="/stores", tags=["stores"])


@router.get("")
async def list_stores(
    type: Optional[StoreType] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    user: AuthUser = Depends(require_roles()),
    service: StoreService = Depends(get_store_service),
):
    return success(await service.list_stores(StoreFilter(type=type, is_active=is_active)))


@router.get("/{store_id}")
async def get_store(
    store_id: int,
    user: AuthUser = Depends(require_roles()),
    service: StoreService = Depends(get_store_service),
):
    return success(await service.get_store(store_id))


@router.post("", status_code=201)
async def create_store(
    request: StoreCreateRequest,
    user: AuthUser = Depends(require_roles(UserRole.ADMIN)),
    service: StoreService = Depends(get_store_service),
):
    return success(await service.create_store(request))


@router.put("/{store_id}")
async def update_store(
    store_id: int,
    request: StoreUpdateRequest,
    user: AuthUser = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER)),
    service: StoreService = Depends(get_store_service),
):
    return success(await service.update_store(store_id, request))


@router.delete("/{store_id}")
async def delete_store(
    store_id: int,
    user: AuthUser = Depends(require_roles(UserRole.ADMIN)),
    service: StoreService = Depends(get_store_service),
):
    """Deactivate a store"""
    return success(await service.delete_store(store_id))
