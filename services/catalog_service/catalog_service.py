"""
Catalog Service Business Logic

Categories and products. Products are never hard deleted because order
lines keep referencing them.
"""

import logging
from enum import Enum
from typing import Any, Dict, List

from core.api_response import PaginationMeta

from .models import (
    Category,
    CategoryCreateRequest,
    CategoryUpdateRequest,
    Product,
    ProductCreateRequest,
    ProductFilter,
    ProductListResponse,
    ProductUpdateRequest,
)
from .protocols import (
    CatalogRepositoryProtocol,
    CatalogValidationError,
    CategoryInUseError,
    CategoryNotFoundError,
    DuplicateSkuError,
    ProductNotFoundError,
)

logger = logging.getLogger(__name__)


def _columns(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in values.items()}


class CatalogService:
    """Category and product management"""

    def __init__(self, repository: CatalogRepositoryProtocol):
        self.repository = repository

    # Categories

    async def list_categories(self) -> List[Category]:
        return await self.repository.list_categories()

    async def get_category(self, category_id: int) -> Category:
        category = await self.repository.get_category(category_id)
        if not category:
            raise CategoryNotFoundError(f"Category #{category_id} not found")
        return category

    async def create_category(self, request: CategoryCreateRequest) -> Category:
        return await self.repository.create_category(request.name, request.description)

    async def update_category(self, category_id: int, request: CategoryUpdateRequest) -> Category:
        fields = request.model_dump(exclude_unset=True)
        if not fields:
            return await self.get_category(category_id)
        category = await self.repository.update_category(category_id, fields)
        if not category:
            raise CategoryNotFoundError(f"Category #{category_id} not found")
        return category

    async def delete_category(self, category_id: int) -> Dict[str, Any]:
        await self.get_category(category_id)
        if await self.repository.category_has_products(category_id):
            raise CategoryInUseError(f"Category #{category_id} still has products")
        await self.repository.delete_category(category_id)
        logger.info(f"Deleted category {category_id}")
        return {"id": category_id, "deleted": True}

    # Products

    async def list_products(self, filters: ProductFilter) -> ProductListResponse:
        products, total = await self.repository.list_products(filters)
        return ProductListResponse(
            data=products,
            meta=PaginationMeta.build(total, filters.page, filters.limit),
        )

    async def get_product(self, product_id: int) -> Product:
        product = await self.repository.get_product(product_id)
        if not product:
            raise ProductNotFoundError(f"Product #{product_id} not found")
        return product

    async def create_product(self, request: ProductCreateRequest) -> Product:
        if await self.repository.sku_exists(request.sku):
            raise DuplicateSkuError(f'SKU "{request.sku}" already exists')
        if not await self.repository.get_category(request.category_id):
            raise CatalogValidationError(f"Category #{request.category_id} not found", field="category_id")

        product_id = await self.repository.create_product(_columns(request.model_dump()))
        return await self.get_product(product_id)

    async def update_product(self, product_id: int, request: ProductUpdateRequest) -> Product:
        await self.get_product(product_id)
        fields = _columns(request.model_dump(exclude_unset=True))

        if fields.get("sku") and await self.repository.sku_exists(fields["sku"], exclude_id=product_id):
            raise DuplicateSkuError(f'SKU "{fields["sku"]}" already exists')
        if fields.get("category_id") and not await self.repository.get_category(fields["category_id"]):
            raise CatalogValidationError(f"Category #{fields['category_id']} not found", field="category_id")

        if fields:
            await self.repository.update_product(product_id, fields)
        return await self.get_product(product_id)

    async def delete_product(self, product_id: int) -> Product:
        """Soft delete: the product is deactivated"""
        await self.get_product(product_id)
        await self.repository.update_product(product_id, {"is_active": False})
        logger.info(f"Deactivated product {product_id}")
        return await self.get_product(product_id)

    async def health_check(self) -> bool:
        return await self.repository.health_check()
