"""
Catalog Service Data Models

Categories and products (rows of the ``items`` table: raw materials,
semi-finished goods and finished products).
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from core.api_response import CamelModel, PaginationMeta


class ItemType(str, Enum):
    MATERIAL = "material"
    SEMI_FINISHED = "semi_finished"
    FINISHED_PRODUCT = "finished_product"


class ItemUnit(str, Enum):
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    PCS = "pcs"
    BOX = "box"
    CAN = "can"
    PACK = "pack"


# Categories

class Category(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class CategoryCreateRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=500)


class CategoryUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=500)


# Products

class CategoryRef(CamelModel):
    id: int
    name: str


class Product(CamelModel):
    id: int
    name: str
    sku: str
    category_id: Optional[int] = None
    category: Optional[CategoryRef] = None
    unit: str
    type: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True
    current_price: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.startswith(("http://", "https://")):
        raise ValueError("image_url must be an http(s) URL")
    return value


class ProductCreateRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    sku: str = Field(..., min_length=2, max_length=100)
    category_id: int = Field(..., gt=0)
    unit: ItemUnit
    type: ItemType
    description: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = Field(None, max_length=500)
    is_active: bool = True
    current_price: Optional[Decimal] = Field(None, ge=0)

    @field_validator('image_url')
    @classmethod
    def validate_image_url(cls, v):
        return _check_url(v)


class ProductUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    sku: Optional[str] = Field(None, min_length=2, max_length=100)
    category_id: Optional[int] = Field(None, gt=0)
    unit: Optional[ItemUnit] = None
    type: Optional[ItemType] = None
    description: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None
    current_price: Optional[Decimal] = Field(None, ge=0)

    @field_validator('image_url')
    @classmethod
    def validate_image_url(cls, v):
        return _check_url(v)


class ProductFilter(CamelModel):
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    category_id: Optional[int] = None
    type: Optional[ItemType] = None
    is_active: Optional[bool] = None
    search: Optional[str] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class ProductListResponse(CamelModel):
    data: List[Product]
    meta: PaginationMeta
