"""
User Service Factory
"""

from core.postgres_client import PostgresClientWrapper
from core.supabase_admin_client import SupabaseAdminClient

from .user_repository import UserRepository
from .user_service import UserService


def create_user_service(db: PostgresClientWrapper, auth_admin: SupabaseAdminClient) -> UserService:
    """Create a UserService bound to the shared database and admin clients"""
    return UserService(repository=UserRepository(db), auth_admin=auth_admin)
