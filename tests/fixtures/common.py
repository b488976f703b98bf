"""
Common/Shared Fixtures

Base factories used across multiple services.
"""
import time
import uuid
from typing import Any, Dict, Optional

import jwt

from core.jwt_manager import AuthUser, UserRole


def make_user_id() -> str:
    """Generate a unique user ID (auth provider ids are UUIDs)"""
    return str(uuid.uuid4())


def make_email(prefix: Optional[str] = None) -> str:
    """Generate a unique email"""
    prefix = prefix or f"test_{uuid.uuid4().hex[:8]}"
    return f"{prefix}@example.com"


def make_auth_user(
    role: UserRole = UserRole.MANAGER,
    store_id: Optional[int] = None,
    user_id: Optional[str] = None,
) -> AuthUser:
    return AuthUser(
        id=user_id or make_user_id(),
        role=role,
        email=make_email(),
        store_id=store_id,
    )


def make_admin() -> AuthUser:
    return make_auth_user(role=UserRole.ADMIN)


def make_store_staff(store_id: Optional[int] = 1) -> AuthUser:
    return make_auth_user(role=UserRole.STORE_STAFF, store_id=store_id)


def make_token(
    secret: str,
    role: Optional[str] = "manager",
    store_id: Optional[int] = None,
    sub: Optional[str] = None,
    audience: str = "authenticated",
    expires_in: int = 3600,
    extra: Optional[Dict[str, Any]] = None,
) -> str:
    """Sign an HS256 access token shaped like the auth provider's"""
    now = int(time.time())
    app_metadata: Dict[str, Any] = {}
    if role is not None:
        app_metadata["role"] = role
    if store_id is not None:
        app_metadata["store_id"] = store_id
    payload = {
        "sub": sub or make_user_id(),
        "email": make_email(),
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
        "app_metadata": app_metadata,
    }
    payload.update(extra or {})
    return jwt.encode(payload, secret, algorithm="HS256")
