"""
User Service

User profiles, roles and store assignment.
"""

from .user_service import UserService

__all__ = ["UserService"]
