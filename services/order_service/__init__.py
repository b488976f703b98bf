"""
Order Service

Store orders, their lines and the order workflow status.
"""

from .models import Order, OrderStatus
from .order_service import OrderService

__all__ = ["Order", "OrderService", "OrderStatus"]
