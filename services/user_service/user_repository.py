"""
User Repository

Data access layer for user profiles using PostgresClient.
"""

import logging
from typing import Any, Dict, List, Optional

from core.postgres_client import PostgresClientWrapper, build_set_clause
from .models import StoreRef, User, UserFilter

logger = logging.getLogger(__name__)

USER_SELECT = """
    SELECT u.id, u.email, u.full_name, u.phone, u.role, u.store_id, u.is_active,
           u.created_at, u.updated_at, s.name AS store_name
    FROM users u
    LEFT JOIN stores s ON s.id = u.store_id
"""


class UserRepository:
    """Repository for user profile operations"""

    def __init__(self, db: Optional[PostgresClientWrapper] = None):
        self.db = db or PostgresClientWrapper()
        logger.info("UserRepository initialized with PostgresClient")

    async def list_users(self, filters: UserFilter) -> List[User]:
        try:
            conditions = []
            params: List[Any] = []
            if filters.role:
                params.append(filters.role.value)
                conditions.append(f"u.role = ${len(params)}")
            if filters.store_id is not None:
                params.append(filters.store_id)
                conditions.append(f"u.store_id = ${len(params)}")
            if filters.is_active is not None:
                params.append(filters.is_active)
                conditions.append(f"u.is_active = ${len(params)}")

            where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
            async with self.db:
                rows = await self.db.query(f"{USER_SELECT} {where} ORDER BY u.created_at DESC", params)
            return [self._dict_to_user(row) for row in rows]
        except Exception as e:
            logger.error(f"Failed to list users: {e}")
            raise

    async def get_user(self, user_id: str) -> Optional[User]:
        try:
            async with self.db:
                row = await self.db.query_row(f"{USER_SELECT} WHERE u.id = $1::uuid", [user_id])
            return self._dict_to_user(row) if row else None
        except Exception as e:
            logger.error(f"Failed to get user {user_id}: {e}")
            raise

    async def create_user(self, fields: Dict[str, Any]) -> User:
        try:
            query = """
                INSERT INTO users (id, email, full_name, phone, role, store_id, is_active, created_at, updated_at)
                VALUES ($1::uuid, $2, $3, $4, $5, $6, TRUE, NOW(), NOW())
            """
            async with self.db:
                await self.db.execute(
                    query,
                    [
                        fields["id"],
                        fields["email"],
                        fields.get("full_name"),
                        fields.get("phone"),
                        fields["role"],
                        fields.get("store_id"),
                    ],
                )
            logger.info(f"Created user profile {fields['id']} ({fields['role']})")
            return await self.get_user(fields["id"])
        except Exception as e:
            logger.error(f"Failed to create user profile: {e}")
            raise

    async def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        try:
            clause, params = build_set_clause(fields)
            query = f"UPDATE users SET {clause}, updated_at = NOW() WHERE id = ${len(params) + 1}::uuid"
            async with self.db:
                count = await self.db.execute(query, params + [user_id])
            if not count:
                return None
            return await self.get_user(user_id)
        except Exception as e:
            logger.error(f"Failed to update user {user_id}: {e}")
            raise

    async def health_check(self) -> bool:
        result = await self.db.health_check()
        return bool(result and result.get("healthy"))

    def _dict_to_user(self, data: Dict[str, Any]) -> User:
        store = None
        if data.get("store_id") is not None and data.get("store_name"):
            store = StoreRef(id=data["store_id"], name=data["store_name"])
        return User(
            id=str(data["id"]),
            email=data["email"],
            full_name=data.get("full_name"),
            phone=data.get("phone"),
            role=data["role"],
            store_id=data.get("store_id"),
            store=store,
            is_active=data.get("is_active") if data.get("is_active") is not None else True,
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
