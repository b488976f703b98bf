"""
Store Service Protocols (Interfaces)
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from core.exceptions import NotFoundError

from .models import Store, StoreFilter


class StoreNotFoundError(NotFoundError):
    pass


@runtime_checkable
class StoreRepositoryProtocol(Protocol):
    """Interface for Store Repository"""

    async def list_stores(self, filters: StoreFilter) -> List[Store]:
        ...

    async def get_store(self, store_id: int) -> Optional[Store]:
        ...

    async def create_store(self, fields: Dict[str, Any]) -> Store:
        ...

    async def update_store(self, store_id: int, fields: Dict[str, Any]) -> Optional[Store]:
        ...

    async def health_check(self) -> bool:
        ...
