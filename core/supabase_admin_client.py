"""
Auth provider admin client

Creates and deletes auth users through the provider's admin REST API
using the service role key. Profiles in ``public.users`` are managed by
the user service; this client only owns the credential side.
"""

import httpx
import logging
from typing import Optional, Dict, Any

from core.config import SupabaseConfig

logger = logging.getLogger(__name__)


class AuthAdminError(Exception):
    """Admin API call failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_duplicate(self) -> bool:
        return "already been registered" in self.message or "already registered" in self.message


class SupabaseAdminClient:
    """Client for the auth provider admin API"""

    def __init__(self, config: Optional[SupabaseConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.config = config or SupabaseConfig.from_env()
        self.base_url = self.config.admin_url
        key = self.config.service_role_key or ""
        self.client = client or httpx.AsyncClient(
            timeout=self.config.admin_timeout,
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
            },
        )
        logger.info(f"SupabaseAdminClient initialized with base_url: {self.base_url}")

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        return body.get("msg") or body.get("message") or body.get("error_description") or str(body)

    async def create_user(self, email: str, password: str) -> Dict[str, Any]:
        """Create a confirmed auth user and return its record"""
        payload = {"email": email, "password": password, "email_confirm": True}
        try:
            response = await self.client.post(f"{self.base_url}/users", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Error creating auth user: {e}")
            raise AuthAdminError(f"Auth provider unreachable: {e}")

        if response.is_error:
            message = self._error_message(response)
            logger.error(f"Failed to create auth user: {response.status_code} {message}")
            raise AuthAdminError(message, response.status_code)

        return response.json()

    async def delete_user(self, user_id: str) -> bool:
        try:
            response = await self.client.delete(f"{self.base_url}/users/{user_id}")
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.error(f"Error deleting auth user {user_id}: {e}")
            return False
