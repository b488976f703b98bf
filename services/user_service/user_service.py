"""
User Service Business Logic

Creating a user writes two records: the auth provider account and the
profile row. A failed profile insert removes the account again.
"""

import logging
from typing import Any, Dict, List

from core.jwt_manager import AuthUser
from core.supabase_admin_client import AuthAdminError

from .models import User, UserCreateRequest, UserFilter, UserRoleUpdateRequest, UserUpdateRequest
from .protocols import (
    AuthAdminClientProtocol,
    DuplicateEmailError,
    UserNotFoundError,
    UserPermissionError,
    UserRepositoryProtocol,
    UserServiceError,
)

logger = logging.getLogger(__name__)

ADMIN_ONLY_FIELDS = ("store_id", "is_active")


class UserService:
    """User profile management"""

    def __init__(self, repository: UserRepositoryProtocol, auth_admin: AuthAdminClientProtocol):
        self.repository = repository
        self.auth_admin = auth_admin

    async def list_users(self, filters: UserFilter) -> List[User]:
        return await self.repository.list_users(filters)

    async def get_user(self, user_id: str) -> User:
        user = await self.repository.get_user(user_id)
        if not user:
            raise UserNotFoundError("User not found")
        return user

    async def get_me(self, caller: AuthUser) -> User:
        return await self.get_user(caller.id)

    async def create_user(self, request: UserCreateRequest) -> User:
        try:
            account = await self.auth_admin.create_user(request.email, request.password)
        except AuthAdminError as e:
            if e.is_duplicate:
                raise DuplicateEmailError("Email already exists")
            raise UserServiceError(f"Failed to create auth user: {e.message}")

        user_id = account.get("id") or (account.get("user") or {}).get("id")
        if not user_id:
            raise UserServiceError("Auth provider returned no user id")

        try:
            user = await self.repository.create_user({
                "id": user_id,
                "email": request.email,
                "full_name": request.full_name,
                "phone": request.phone,
                "role": request.role.value,
                "store_id": request.store_id,
            })
        except Exception as e:
            logger.error(f"Profile insert failed for {user_id}, removing auth user: {e}")
            await self.auth_admin.delete_user(user_id)
            raise UserServiceError("Failed to create user profile")

        logger.info(f"Created user {user_id} with role {request.role.value}")
        return user

    async def update_user(self, user_id: str, request: UserUpdateRequest, caller: AuthUser) -> User:
        """Admins may update anyone; other users only themselves"""
        if not caller.is_admin and caller.id != user_id:
            raise UserPermissionError("Cannot update other users")
        await self.get_user(user_id)

        fields = request.model_dump(exclude_unset=True)
        if not caller.is_admin:
            for field in ADMIN_ONLY_FIELDS:
                fields.pop(field, None)
        if not fields:
            return await self.get_user(user_id)

        user = await self.repository.update_user(user_id, fields)
        if not user:
            raise UserNotFoundError("User not found")
        return user

    async def update_role(self, user_id: str, request: UserRoleUpdateRequest) -> User:
        await self.get_user(user_id)
        user = await self.repository.update_user(user_id, {"role": request.role.value})
        logger.info(f"User {user_id} role set to {request.role.value}")
        return user

    async def deactivate_user(self, user_id: str) -> Dict[str, Any]:
        await self.get_user(user_id)
        await self.repository.update_user(user_id, {"is_active": False})
        logger.info(f"Deactivated user {user_id}")
        return {"id": user_id, "message": "User deactivated"}

    async def health_check(self) -> bool:
        return await self.repository.health_check()
