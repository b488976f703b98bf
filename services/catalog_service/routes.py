"""
Catalog API Routes

Two routers: ``/categories`` and ``/products``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.api_response import success
from core.auth_dependencies import require_roles
from core.jwt_manager import AuthUser, UserRole
from services.dependencies import get_catalog_service

from .catalog_service import CatalogService
from .models import (
    CategoryCreateRequest,
    CategoryUpdateRequest,
    ItemType,
    ProductCreateRequest,
    ProductFilter,
    ProductUpdateRequest,
)

categories_router = APIRouter(prefix="/categories", tags=["categories"])
products_router = APIRouter(prefix="/products", tags=["products"])

editors = require_roles(UserRole.ADMIN, UserRole.MANAGER)
admins = require_roles(UserRole.ADMIN)


# ============================================================================
# Categories
# ============================================================================

@categories_router.get("")
async def list_categories(
    user: AuthUser = Depends(require_roles()),
    service: CatalogService = Depends(get_catalog_service),
):
    return success(await service.list_categories())


@categories_router.get("/{category_id}")
async def get_category(
    category_id: int,
    user: AuthUser = Depends(require_roles()),
    service: CatalogService = Depends(get_catalog_service),
):
    return success(await service.get_category(category_id))


@categories_router.post("", status_code=201)
async def create_category(
    request: CategoryCreateRequest,
    user: AuthUser = Depends(editors),
    service: CatalogService = Depends(get_catalog_service),
):
    return success(await service.create_category(request))


@categories_router.put("/{category_id}")
async def update_category(
    category_id: int,
    request: CategoryUpdateRequest,
    user: AuthUser = Depends(editors),
    service: CatalogService = Depends(get_catalog_service),
):
    return success(await service.update_category(category_id, request))


@categories_router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    user: AuthUser = Depends(admins),
    service: CatalogService = Depends(get_catalog_service),
):
    return success(await service.delete_category(category_id))


# ============================================================================
# Products
# ============================================================================

@products_router.get("")
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category_id: Optional[int] = Query(None, alias="categoryId", gt=0),
    type: Optional[ItemType] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None),
    user: AuthUser = Depends(require_roles()),
    service: CatalogService = Depends(get_catalog_service),
):
    filters = ProductFilter(
        page=page,
        limit=limit,
        category_id=category_id,
        type=type,
        is_active=is_active,
        search=search,
    )
    return success(await service.list_products(filters))


@products_router.get("/{product_id}")
async def get_product(
    product_id: int,
    user: AuthUser = Depends(require_roles()),
    service: CatalogService = Depends(get_catalog_service),
):
    return success(await service.get_product(product_id))


@products_router.post("", status_code=201)
async def create_product(
    request: ProductCreateRequest,
    user: AuthUser = Depends(editors),
    service: CatalogService = Depends(get_catalog_service),
):
    return success(await service.create_product(request))


@products_router.put("/{product_id}")
async def update_product(
    product_id: int,
    request: ProductUpdateRequest,
    user: AuthUser = Depends(editors),
    service: CatalogService = Depends(get_catalog_service),
):
    return success(await service.update_product(product_id, request))


@products_router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    user: AuthUser = Depends(admins),
    service: CatalogService = Depends(get_catalog_service),
):
    """Deactivate a product"""
    return success(await service.delete_product(product_id))
