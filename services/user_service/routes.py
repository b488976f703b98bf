"""
User API Routes
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from core.api_response import success
from core.auth_dependencies import require_roles
from core.jwt_manager import AuthUser, UserRole
from services.dependencies import get_user_service

from .models import UserCreateRequest, UserFilter, UserRoleUpdateRequest, UserUpdateRequest
from .user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

managers = require_roles(UserRole.ADMIN, UserRole.MANAGER)
admins = require_roles(UserRole.ADMIN)


@router.get("")
async def list_users(
    role: Optional[UserRole] = Query(None),
    store_id: Optional[int] = Query(None, alias="storeId"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    user: AuthUser = Depends(managers),
    service: UserService = Depends(get_user_service),
):
    filters = UserFilter(role=role, store_id=store_id, is_active=is_active)
    return success(await service.list_users(filters))


@router.get("/me")
async def get_me(
    user: AuthUser = Depends(require_roles()),
    service: UserService = Depends(get_user_service),
):
    return success(await service.get_me(user))


@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    user: AuthUser = Depends(managers),
    service: UserService = Depends(get_user_service),
):
    return success(await service.get_user(str(user_id)))


@router.post("", status_code=201)
async def create_user(
    request: UserCreateRequest,
    user: AuthUser = Depends(admins),
    service: UserService = Depends(get_user_service),
):
    return success(await service.create_user(request))


@router.put("/{user_id}/role")
async def update_role(
    user_id: UUID,
    request: UserRoleUpdateRequest,
    user: AuthUser = Depends(admins),
    service: UserService = Depends(get_user_service),
):
    return success(await service.update_role(str(user_id), request))


@router.put("/{user_id}")
async def update_user(
    user_id: UUID,
    request: UserUpdateRequest,
    user: AuthUser = Depends(require_roles()),
    service: UserService = Depends(get_user_service),
):
    """Update a profile; store and active flag are admin-only"""
    return success(await service.update_user(str(user_id), request, user))


@router.delete("/{user_id}")
async def deactivate_user(
    user_id: UUID,
    user: AuthUser = Depends(admins),
    service: UserService = Depends(get_user_service),
):
    return success(await service.deactivate_user(str(user_id)))
