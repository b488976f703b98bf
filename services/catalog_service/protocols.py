"""
Catalog Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from core.exceptions import ConflictError, NotFoundError, ValidationError

from .models import Category, Product, ProductFilter


# ============================================================================
# Custom Exceptions
# ============================================================================

class CategoryNotFoundError(NotFoundError):
    pass


class CategoryInUseError(ConflictError):
    """Category still has products"""
    pass


class ProductNotFoundError(NotFoundError):
    pass


class DuplicateSkuError(ConflictError):
    pass


class CatalogValidationError(ValidationError):
    pass


# ============================================================================
# Repository Protocol
# ============================================================================

@runtime_checkable
class CatalogRepositoryProtocol(Protocol):
    """Interface for Catalog Repository (categories and products)"""

    # Categories
    async def list_categories(self) -> List[Category]:
        ...

    async def get_category(self, category_id: int) -> Optional[Category]:
        ...

    async def create_category(self, name: str, description: Optional[str] = None) -> Category:
        ...

    async def update_category(self, category_id: int, fields: Dict[str, Any]) -> Optional[Category]:
        ...

    async def delete_category(self, category_id: int) -> bool:
        ...

    async def category_has_products(self, category_id: int) -> bool:
        ...

    # Products
    async def list_products(self, filters: ProductFilter) -> Tuple[List[Product], int]:
        ...

    async def get_product(self, product_id: int) -> Optional[Product]:
        ...

    async def sku_exists(self, sku: str, exclude_id: Optional[int] = None) -> bool:
        ...

    async def create_product(self, fields: Dict[str, Any]) -> int:
        ...

    async def update_product(self, product_id: int, fields: Dict[str, Any]) -> bool:
        ...

    async def health_check(self) -> bool:
        ...
