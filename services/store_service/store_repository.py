"""
Store Repository

Data access layer for franchise stores and the central kitchen.
"""

import logging
from typing import Any, Dict, List, Optional

from core.postgres_client import PostgresClientWrapper, build_set_clause
from .models import Store, StoreFilter

logger = logging.getLogger(__name__)

STORE_COLUMNS = "id, name, address, type, phone, is_active, settings, created_at, updated_at"


class StoreRepository:
    """Repository for store data operations"""

    def __init__(self, db: Optional[PostgresClientWrapper] = None):
        self.db = db or PostgresClientWrapper()
        logger.info("StoreRepository initialized with PostgresClient")

    async def list_stores(self, filters: StoreFilter) -> List[Store]:
        try:
            conditions = []
            params: List[Any] = []
            if filters.type:
                params.append(filters.type.value)
                conditions.append(f"type = ${len(params)}")
            if filters.is_active is not None:
                params.append(filters.is_active)
                conditions.append(f"is_active = ${len(params)}")

            where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
            async with self.db:
                rows = await self.db.query(f"SELECT {STORE_COLUMNS} FROM stores {where} ORDER BY name", params)
            return [self._dict_to_store(row) for row in rows]
        except Exception as e:
            logger.error(f"Failed to list stores: {e}")
            raise

    async def get_store(self, store_id: int) -> Optional[Store]:
        try:
            async with self.db:
                row = await self.db.query_row(f"SELECT {STORE_COLUMNS} FROM stores WHERE id = $1", [store_id])
            return self._dict_to_store(row) if row else None
        except Exception as e:
            logger.error(f"Failed to get store {store_id}: {e}")
            raise

    async def create_store(self, fields: Dict[str, Any]) -> Store:
        try:
            columns = list(fields.keys())
            placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
            query = f"""
                INSERT INTO stores ({', '.join(columns)}, created_at, updated_at)
                VALUES ({placeholders}, NOW(), NOW())
                RETURNING {STORE_COLUMNS}
            """
            async with self.db:
                row = await self.db.query_row(query, list(fields.values()))
            logger.info(f"Created store {row['id']}: {row['name']}")
            return self._dict_to_store(row)
        except Exception as e:
            logger.error(f"Failed to create store: {e}")
            raise

    async def update_store(self, store_id: int, fields: Dict[str, Any]) -> Optional[Store]:
        try:
            clause, params = build_set_clause(fields)
            query = f"""
                UPDATE stores SET {clause}, updated_at = NOW()
                WHERE id = ${len(params) + 1}
                RETURNING {STORE_COLUMNS}
            """
            async with self.db:
                row = await self.db.query_row(query, params + [store_id])
            return self._dict_to_store(row) if row else None
        except Exception as e:
            logger.error(f"Failed to update store {store_id}: {e}")
            raise

    async def health_check(self) -> bool:
        result = await self.db.health_check()
        return bool(result and result.get("healthy"))

    def _dict_to_store(self, data: Dict[str, Any]) -> Store:
        return Store(
            id=data["id"],
            name=data["name"],
            address=data.get("address"),
            type=data["type"],
            phone=data.get("phone"),
            is_active=data.get("is_active") if data.get("is_active") is not None else True,
            settings=data.get("settings"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
