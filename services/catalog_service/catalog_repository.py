"""
Catalog Repository

Data access layer for categories and products (``items`` table).
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import asyncpg

from core.postgres_client import PostgresClientWrapper, build_set_clause
from .models import Category, CategoryRef, Product, ProductFilter
from .protocols import DuplicateSkuError

logger = logging.getLogger(__name__)

PRODUCT_SELECT = """
    SELECT i.id, i.name, i.sku, i.category_id, i.unit, i.type, i.description,
           i.image_url, i.is_active, i.current_price, i.created_at, i.updated_at,
           c.name AS category_name
    FROM items i
    LEFT JOIN categories c ON c.id = i.category_id
"""


class CatalogRepository:
    """
    Repository for categories and products

    Handles all database operations for the catalog using PostgresClient.
    """

    def __init__(self, db: Optional[PostgresClientWrapper] = None):
        self.db = db or PostgresClientWrapper()
        logger.info("CatalogRepository initialized with PostgresClient")

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self) -> List[Category]:
        try:
            async with self.db:
                rows = await self.db.query(
                    "SELECT id, name, description, created_at FROM categories ORDER BY name"
                )
            return [Category(**row) for row in rows]
        except Exception as e:
            logger.error(f"Failed to list categories: {e}")
            raise

    async def get_category(self, category_id: int) -> Optional[Category]:
        try:
            async with self.db:
                row = await self.db.query_row(
                    "SELECT id, name, description, created_at FROM categories WHERE id = $1",
                    [category_id],
                )
            return Category(**row) if row else None
        except Exception as e:
            logger.error(f"Failed to get category {category_id}: {e}")
            raise

    async def create_category(self, name: str, description: Optional[str] = None) -> Category:
        try:
            query = """
                INSERT INTO categories (name, description, created_at)
                VALUES ($1, $2, NOW())
                RETURNING id, name, description, created_at
            """
            async with self.db:
                row = await self.db.query_row(query, [name, description])
            logger.info(f"Created category {row['id']}: {name}")
            return Category(**row)
        except Exception as e:
            logger.error(f"Failed to create category: {e}")
            raise

    async def update_category(self, category_id: int, fields: Dict[str, Any]) -> Optional[Category]:
        try:
            clause, params = build_set_clause(fields)
            query = f"""
                UPDATE categories SET {clause} WHERE id = ${len(params) + 1}
                RETURNING id, name, description, created_at
            """
            async with self.db:
                row = await self.db.query_row(query, params + [category_id])
            return Category(**row) if row else None
        except Exception as e:
            logger.error(f"Failed to update category {category_id}: {e}")
            raise

    async def delete_category(self, category_id: int) -> bool:
        try:
            async with self.db:
                count = await self.db.execute("DELETE FROM categories WHERE id = $1", [category_id])
            return count > 0
        except Exception as e:
            logger.error(f"Failed to delete category {category_id}: {e}")
            raise

    async def category_has_products(self, category_id: int) -> bool:
        try:
            async with self.db:
                value = await self.db.query_value(
                    "SELECT 1 FROM items WHERE category_id = $1 LIMIT 1", [category_id]
                )
            return value is not None
        except Exception as e:
            logger.error(f"Failed to check products of category {category_id}: {e}")
            raise

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def list_products(self, filters: ProductFilter) -> Tuple[List[Product], int]:
        try:
            conditions = []
            params: List[Any] = []

            if filters.category_id is not None:
                params.append(filters.category_id)
                conditions.append(f"i.category_id = ${len(params)}")
            if filters.type:
                params.append(filters.type.value)
                conditions.append(f"i.type = ${len(params)}")
            if filters.is_active is not None:
                params.append(filters.is_active)
                conditions.append(f"i.is_active = ${len(params)}")
            if filters.search:
                params.append(f"%{filters.search}%")
                conditions.append(f"(i.name ILIKE ${len(params)} OR i.sku ILIKE ${len(params)})")

            where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
            count_query = f"SELECT COUNT(*) FROM items i {where}"
            page_query = f"""
                {PRODUCT_SELECT} {where}
                ORDER BY i.name
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
            """

            async with self.db:
                total = await self.db.query_value(count_query, params)
                rows = await self.db.query(page_query, params + [filters.limit, filters.offset])

            return [self._dict_to_product(row) for row in rows], int(total or 0)

        except Exception as e:
            logger.error(f"Failed to list products: {e}")
            raise

    async def get_product(self, product_id: int) -> Optional[Product]:
        try:
            async with self.db:
                row = await self.db.query_row(f"{PRODUCT_SELECT} WHERE i.id = $1", [product_id])
            return self._dict_to_product(row) if row else None
        except Exception as e:
            logger.error(f"Failed to get product {product_id}: {e}")
            raise

    async def sku_exists(self, sku: str, exclude_id: Optional[int] = None) -> bool:
        try:
            query = "SELECT 1 FROM items WHERE sku = $1"
            params: List[Any] = [sku]
            if exclude_id is not None:
                query += " AND id <> $2"
                params.append(exclude_id)
            async with self.db:
                value = await self.db.query_value(query, params)
            return value is not None
        except Exception as e:
            logger.error(f"Failed to check sku {sku}: {e}")
            raise

    async def create_product(self, fields: Dict[str, Any]) -> int:
        try:
            columns = list(fields.keys())
            placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
            query = f"""
                INSERT INTO items ({', '.join(columns)}, created_at, updated_at)
                VALUES ({placeholders}, NOW(), NOW())
                RETURNING id
            """
            async with self.db:
                product_id = await self.db.query_value(query, list(fields.values()))
            logger.info(f"Created product {product_id}: {fields.get('sku')}")
            return product_id
        except asyncpg.UniqueViolationError:
            raise DuplicateSkuError(f'SKU "{fields.get("sku")}" already exists')
        except Exception as e:
            logger.error(f"Failed to create product: {e}")
            raise

    async def update_product(self, product_id: int, fields: Dict[str, Any]) -> bool:
        try:
            clause, params = build_set_clause(fields)
            query = f"UPDATE items SET {clause}, updated_at = NOW() WHERE id = ${len(params) + 1}"
            async with self.db:
                count = await self.db.execute(query, params + [product_id])
            return count > 0
        except asyncpg.UniqueViolationError:
            raise DuplicateSkuError(f'SKU "{fields.get("sku")}" already exists')
        except Exception as e:
            logger.error(f"Failed to update product {product_id}: {e}")
            raise

    async def health_check(self) -> bool:
        result = await self.db.health_check()
        return bool(result and result.get("healthy"))

    def _dict_to_product(self, data: Dict[str, Any]) -> Product:
        category = None
        if data.get("category_id") is not None and data.get("category_name"):
            category = CategoryRef(id=data["category_id"], name=data["category_name"])
        return Product(
            id=data["id"],
            name=data["name"],
            sku=data["sku"],
            category_id=data.get("category_id"),
            category=category,
            unit=data["unit"],
            type=data["type"],
            description=data.get("description"),
            image_url=data.get("image_url"),
            is_active=data.get("is_active") if data.get("is_active") is not None else True,
            current_price=data.get("current_price"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
