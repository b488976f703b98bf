#!/usr/bin/env python3
"""Auth provider (Supabase) configuration"""
import os
from dataclasses import dataclass
from typing import Optional

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class SupabaseConfig:
    """Hosted auth provider settings used for token verification and user admin"""

    url: str = "http://localhost:54321"
    service_role_key: Optional[str] = None
    jwt_audience: str = "authenticated"
    # HS256 secret, only set for local stacks that sign with a shared secret
    jwt_secret: Optional[str] = None
    jwks_cache_lifespan: int = 300
    admin_timeout: float = 10.0

    @property
    def jwks_url(self) -> str:
        return f"{self.url.rstrip('/')}/auth/v1/.well-known/jwks.json"

    @property
    def admin_url(self) -> str:
        return f"{self.url.rstrip('/')}/auth/v1/admin"

    @classmethod
    def from_env(cls) -> 'SupabaseConfig':
        """Load auth provider config from environment"""
        return cls(
            url=os.getenv("SUPABASE_URL", "http://localhost:54321"),
            service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY") or None,
            jwt_audience=os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated"),
            jwt_secret=os.getenv("SUPABASE_JWT_SECRET") or None,
            jwks_cache_lifespan=_int(os.getenv("SUPABASE_JWKS_CACHE_LIFESPAN", "300"), 300),
        )
