"""
Mock dependencies for User Service component testing
"""
import uuid
from typing import Any, Dict, List, Optional

from core.supabase_admin_client import AuthAdminError
from services.user_service.models import User, UserFilter


class MockUserRepository:
    """In-memory user profiles"""

    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}
        self._insert_error: Optional[Exception] = None

    def set_user(self, user_id: Optional[str] = None, role: str = "store_staff", **fields) -> str:
        user_id = user_id or str(uuid.uuid4())
        self.users[user_id] = {
            "id": user_id,
            "email": f"{user_id[:8]}@example.com",
            "role": role,
            "is_active": True,
        }
        self.users[user_id].update(fields)
        return user_id

    def fail_inserts(self, error: Exception):
        self._insert_error = error

    async def list_users(self, filters: UserFilter) -> List[User]:
        rows = list(self.users.values())
        if filters.role:
            rows = [r for r in rows if r["role"] == filters.role.value]
        return [User(**r) for r in rows]

    async def get_user(self, user_id: str) -> Optional[User]:
        row = self.users.get(user_id)
        return User(**row) if row else None

    async def create_user(self, fields: Dict[str, Any]) -> User:
        if self._insert_error:
            raise self._insert_error
        profile = dict(fields)
        user_id = self.set_user(profile.pop("id"), **profile)
        return User(**self.users[user_id])

    async def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        if user_id not in self.users:
            return None
        self.users[user_id].update(fields)
        return User(**self.users[user_id])

    async def health_check(self) -> bool:
        return True


class MockAuthAdminClient:
    """Records auth provider admin calls"""

    def __init__(self):
        self.accounts: Dict[str, str] = {}
        self.deleted: List[str] = []

    async def create_user(self, email: str, password: str) -> Dict[str, Any]:
        if email in self.accounts.values():
            raise AuthAdminError("A user with this email address has already been registered", 422)
        user_id = str(uuid.uuid4())
        self.accounts[user_id] = email
        return {"id": user_id, "email": email}

    async def delete_user(self, user_id: str) -> bool:
        self.deleted.append(user_id)
        return self.accounts.pop(user_id, None) is not None
