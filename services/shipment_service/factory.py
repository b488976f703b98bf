"""
Shipment Service Factory

Builds the shipment service with its repository injected.
"""

from typing import Optional

from core.postgres_client import PostgresClientWrapper

from .shipment_repository import ShipmentRepository
from .shipment_service import ShipmentService


def create_shipment_service(
    db: PostgresClientWrapper,
    central_kitchen_store_id: Optional[int] = None,
) -> ShipmentService:
    """Create a ShipmentService bound to the shared database client"""
    return ShipmentService(
        repository=ShipmentRepository(db),
        central_kitchen_store_id=central_kitchen_store_id,
    )
