"""
User Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ServiceError

from .models import User, UserFilter


class UserServiceError(ServiceError):
    """Base exception for user service errors"""
    pass


class UserNotFoundError(NotFoundError):
    pass


class DuplicateEmailError(ConflictError):
    pass


class UserPermissionError(PermissionDeniedError):
    pass


@runtime_checkable
class UserRepositoryProtocol(Protocol):
    """Interface for User Repository"""

    async def list_users(self, filters: UserFilter) -> List[User]:
        ...

    async def get_user(self, user_id: str) -> Optional[User]:
        ...

    async def create_user(self, fields: Dict[str, Any]) -> User:
        ...

    async def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        ...

    async def health_check(self) -> bool:
        ...


@runtime_checkable
class AuthAdminClientProtocol(Protocol):
    """Interface for the auth provider admin API"""

    async def create_user(self, email: str, password: str) -> Dict[str, Any]:
        ...

    async def delete_user(self, user_id: str) -> bool:
        ...
