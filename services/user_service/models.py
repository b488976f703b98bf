"""
User Service Data Models

Profiles stored in ``public.users``; credentials live in the auth provider.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from core.api_response import CamelModel
from core.jwt_manager import UserRole


class StoreRef(CamelModel):
    id: int
    name: str


class User(CamelModel):
    id: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    store_id: Optional[int] = None
    store: Optional[StoreRef] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserCreateRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    store_id: Optional[int] = Field(None, gt=0)


class UserUpdateRequest(CamelModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    store_id: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None


class UserRoleUpdateRequest(CamelModel):
    role: UserRole


class UserFilter(CamelModel):
    role: Optional[UserRole] = None
    store_id: Optional[int] = None
    is_active: Optional[bool] = None
