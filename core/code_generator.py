"""
Entity code generator

Human readable codes for orders, shipments and other documents.
Format: ``{PREFIX}-{YYYYMMDD}-{RANDOM}`` e.g. ``ORD-20260119-A1B2C``.
"""

import secrets
import string
from datetime import datetime, timezone
from typing import Optional

ORDER_PREFIX = "ORD"
SHIPMENT_PREFIX = "SHP"

_ALPHABET = string.ascii_uppercase + string.digits


def _random_part(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def generate_code(prefix: str, length: int = 5, now: Optional[datetime] = None) -> str:
    """Generate ``{prefix}-{YYYYMMDD}-{length random chars}``"""
    now = now or datetime.now(timezone.utc)
    return f"{prefix}-{now.strftime('%Y%m%d')}-{_random_part(length)}"
