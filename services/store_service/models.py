"""
Store Service Data Models
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from core.api_response import CamelModel


class StoreType(str, Enum):
    FRANCHISE = "franchise"
    CENTRAL_KITCHEN = "central_kitchen"


class Store(CamelModel):
    id: int
    name: str
    address: Optional[str] = None
    type: StoreType
    phone: Optional[str] = None
    is_active: bool = True
    settings: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StoreCreateRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    type: StoreType
    phone: Optional[str] = Field(None, max_length=20)
    is_active: bool = True
    settings: Optional[Dict[str, Any]] = None


class StoreUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    type: Optional[StoreType] = None
    phone: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = None
    settings: Optional[Dict[str, Any]] = None


class StoreFilter(CamelModel):
    type: Optional[StoreType] = None
    is_active: Optional[bool] = None
