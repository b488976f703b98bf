"""
Mock dependencies for Store Service component testing
"""
from typing import Any, Dict, List, Optional

from services.store_service.models import Store, StoreFilter


class MockStoreRepository:
    """In-memory stores"""

    def __init__(self):
        self.stores: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1

    def set_store(self, name: str = "District 1", type: str = "franchise", **fields) -> int:
        store_id = self._next_id
        self._next_id += 1
        self.stores[store_id] = {"id": store_id, "name": name, "type": type, "is_active": True}
        self.stores[store_id].update(fields)
        return store_id

    async def list_stores(self, filters: StoreFilter) -> List[Store]:
        rows = list(self.stores.values())
        if filters.type:
            rows = [r for r in rows if r["type"] == filters.type.value]
        if filters.is_active is not None:
            rows = [r for r in rows if r["is_active"] == filters.is_active]
        return [Store(**r) for r in rows]

    async def get_store(self, store_id: int) -> Optional[Store]:
        row = self.stores.get(store_id)
        return Store(**row) if row else None

    async def create_store(self, fields: Dict[str, Any]) -> Store:
        store_id = self.set_store(**fields)
        return Store(**self.stores[store_id])

    async def update_store(self, store_id: int, fields: Dict[str, Any]) -> Optional[Store]:
        if store_id not in self.stores:
            return None
        self.stores[store_id].update(fields)
        return Store(**self.stores[store_id])

    async def health_check(self) -> bool:
        return True
