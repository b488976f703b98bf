"""
Store Service Business Logic
"""

import logging
from enum import Enum
from typing import Any, Dict, List

from .models import Store, StoreCreateRequest, StoreFilter, StoreUpdateRequest
from .protocols import StoreNotFoundError, StoreRepositoryProtocol

logger = logging.getLogger(__name__)


def _columns(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in values.items()}


class StoreService:
    """Store management; deleting a store deactivates it"""

    def __init__(self, repository: StoreRepositoryProtocol):
        self.repository = repository

    async def list_stores(self, filters: StoreFilter) -> List[Store]:
        return await self.repository.list_stores(filters)

    async def get_store(self, store_id: int) -> Store:
        store = await self.repository.get_store(store_id)
        if not store:
            raise StoreNotFoundError(f"Store #{store_id} not found")
        return store

    async def create_store(self, request: StoreCreateRequest) -> Store:
        return await self.repository.create_store(_columns(request.model_dump()))

    async def update_store(self, store_id: int, request: StoreUpdateRequest) -> Store:
        fields = _columns(request.model_dump(exclude_unset=True))
        if not fields:
            return await self.get_store(store_id)
        store = await self.repository.update_store(store_id, fields)
        if not store:
            raise StoreNotFoundError(f"Store #{store_id} not found")
        return store

    async def delete_store(self, store_id: int) -> Store:
        store = await self.repository.update_store(store_id, {"is_active": False})
        if not store:
            raise StoreNotFoundError(f"Store #{store_id} not found")
        logger.info(f"Deactivated store {store_id}")
        return store

    async def health_check(self) -> bool:
        return await self.repository.health_check()
