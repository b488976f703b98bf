"""
Shared Test Fixtures

Centralized factories used across all test layers.

Structure:
    - common.py: IDs, callers and tokens
"""

from .common import (
    make_admin,
    make_auth_user,
    make_email,
    make_store_staff,
    make_token,
    make_user_id,
)

__all__ = [
    "make_admin",
    "make_auth_user",
    "make_email",
    "make_store_staff",
    "make_token",
    "make_user_id",
]
