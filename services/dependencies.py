"""
Service Factory and FastAPI dependencies

Owns the shared database and admin clients and the service instances built
on them. Routes resolve services through the ``get_*_service`` dependencies,
which tests replace via ``app.dependency_overrides``.
"""

import logging
from typing import Optional

from fastapi import HTTPException, status

from core.config import AppConfig, get_settings
from core.postgres_client import PostgresClientWrapper
from core.supabase_admin_client import SupabaseAdminClient

from .catalog_service.catalog_service import CatalogService
from .catalog_service.factory import create_catalog_service
from .order_service.factory import create_order_service
from .order_service.order_service import OrderService
from .shipment_service.factory import create_shipment_service
from .shipment_service.shipment_service import ShipmentService
from .store_service.factory import create_store_service
from .store_service.store_service import StoreService
from .user_service.factory import create_user_service
from .user_service.user_service import UserService

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Factory for creating the API's service components"""

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or get_settings()
        self._db: Optional[PostgresClientWrapper] = None
        self._auth_admin: Optional[SupabaseAdminClient] = None
        self._orders: Optional[OrderService] = None
        self._shipments: Optional[ShipmentService] = None
        self._catalog: Optional[CatalogService] = None
        self._stores: Optional[StoreService] = None
        self._users: Optional[UserService] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing service components...")

        self._db = PostgresClientWrapper(self.config.database)
        await self._db.connect()
        self._auth_admin = SupabaseAdminClient(self.config.supabase)

        self._orders = create_order_service(self._db)
        self._shipments = create_shipment_service(
            self._db, central_kitchen_store_id=self.config.central_kitchen_store_id
        )
        self._catalog = create_catalog_service(self._db)
        self._stores = create_store_service(self._db)
        self._users = create_user_service(self._db, self._auth_admin)

        logger.info("Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing service components...")
        if self._auth_admin:
            await self._auth_admin.close()
        if self._db:
            await self._db.close()
        logger.info("Service components closed")

    async def database_healthy(self) -> bool:
        if not self._db:
            return False
        result = await self._db.health_check()
        return bool(result and result.get("healthy"))

    def _require(self, component):
        if component is None:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return component

    @property
    def orders(self) -> OrderService:
        return self._require(self._orders)

    @property
    def shipments(self) -> ShipmentService:
        return self._require(self._shipments)

    @property
    def catalog(self) -> CatalogService:
        return self._require(self._catalog)

    @property
    def stores(self) -> StoreService:
        return self._require(self._stores)

    @property
    def users(self) -> UserService:
        return self._require(self._users)


factory: Optional[ServiceFactory] = None


def set_factory(instance: Optional[ServiceFactory]) -> None:
    global factory
    factory = instance


def _get_factory() -> ServiceFactory:
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory


def get_order_service() -> OrderService:
    return _get_factory().orders


def get_shipment_service() -> ShipmentService:
    return _get_factory().shipments


def get_catalog_service() -> CatalogService:
    return _get_factory().catalog


def get_store_service() -> StoreService:
    return _get_factory().stores


def get_user_service() -> UserService:
    return _get_factory().users
