"""
Shipment Service

Shipments, shipment items, batch stock movements and order fulfillment
reconciliation.
"""

from .models import FulfillmentStatus, Shipment, ShipmentStatus
from .shipment_service import ShipmentService

__all__ = ["FulfillmentStatus", "Shipment", "ShipmentService", "ShipmentStatus"]
