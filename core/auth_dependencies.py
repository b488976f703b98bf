"""
FastAPI Authentication Dependencies

Bearer token authentication, role checks and store scoping shared by every
router.

Usage:
    @router.get("/orders")
    async def list_orders(
        user: AuthUser = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER))
    ):
        ...
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, status

from core.jwt_manager import AuthUser, UserRole, get_jwt_manager

logger = logging.getLogger(__name__)

ALL_ROLES = tuple(UserRole)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(authorization: Optional[str] = Header(None)) -> AuthUser:
    """
    Resolve the caller from the Authorization header

    Declared sync so the JWKS lookup runs in the threadpool.

    Raises:
        HTTPException 401: missing, invalid or role-less token
    """
    if not authorization:
        raise _unauthorized("Authorization header required")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise _unauthorized("Invalid authorization header format")

    result = get_jwt_manager().verify_token(token.strip())
    if not result.get("valid"):
        logger.warning(f"Rejected token: {result.get('error')}")
        raise _unauthorized(result.get("error", "Invalid token"))

    return result["user"]


def require_roles(*roles: UserRole) -> Callable[..., AuthUser]:
    """Dependency factory allowing only the given roles"""
    allowed = set(roles or ALL_ROLES)

    def dependency(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{user.role.value}' is not allowed to perform this action",
            )
        return user

    return dependency


def check_store_access(store_id: int, user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Path-level store guard: store staff may only reach their own store

    Expects a ``store_id`` path parameter on the route.
    """
    if not user.can_access_store(store_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own store",
        )
    return user
