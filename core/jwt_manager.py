"""
JWT Token Manager for the kitchen API

Verifies access tokens issued by the hosted auth provider. Tokens are signed
with ES256 and the public keys are published as a JWKS document; local
stacks that sign with a shared secret (HS256) are accepted when the secret
is configured. Role and store claims are injected into ``app_metadata`` by
the provider's access token hook and trusted as-is.
"""

import jwt
import logging
from typing import Dict, Any, Optional
from datetime import datetime, timezone
from enum import Enum
from dataclasses import dataclass

from core.config import SupabaseConfig

logger = logging.getLogger(__name__)

MISSING_ROLE_MESSAGE = (
    "Missing role in token. Check: 1) User exists in public.users with role, "
    "2) custom_access_token_hook is enabled in the auth provider"
)


class UserRole(str, Enum):
    """Application roles carried in app_metadata.role"""
    ADMIN = "admin"
    MANAGER = "manager"
    CK_STAFF = "ck_staff"
    STORE_STAFF = "store_staff"
    COORDINATOR = "coordinator"


@dataclass
class AuthUser:
    """Authenticated caller extracted from a verified token"""
    id: str
    role: UserRole
    email: Optional[str] = None
    store_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_store_staff(self) -> bool:
        return self.role == UserRole.STORE_STAFF

    def can_access_store(self, store_id: Optional[int]) -> bool:
        """Store staff are scoped to their own store, other roles are not"""
        if not self.is_store_staff:
            return True
        return self.store_id is not None and self.store_id == store_id


def claims_to_user(payload: Dict[str, Any]) -> AuthUser:
    """Build an AuthUser from verified claims.

    Raises:
        ValueError: the token carries no usable role
    """
    app_metadata = payload.get("app_metadata") or {}
    role = app_metadata.get("role")
    if not role:
        raise ValueError(MISSING_ROLE_MESSAGE)
    try:
        user_role = UserRole(role)
    except ValueError:
        raise ValueError(f"Unknown role in token: {role}")

    store_id = app_metadata.get("store_id")
    if store_id is not None:
        try:
            store_id = int(store_id)
        except (TypeError, ValueError):
            store_id = None

    return AuthUser(
        id=payload.get("sub"),
        email=payload.get("email"),
        role=user_role,
        store_id=store_id,
    )


class JWTManager:
    """
    Verifier for auth provider access tokens

    Features:
    - ES256 verification against the provider's JWKS (keys cached)
    - Optional HS256 verification with a shared secret
    - Audience and expiry checks
    - Role/store extraction from app_metadata
    """

    def __init__(self, config: Optional[SupabaseConfig] = None, jwks_client: Optional[jwt.PyJWKClient] = None):
        self.config = config or SupabaseConfig.from_env()
        self._jwks_client = jwks_client

    @property
    def jwks_client(self) -> jwt.PyJWKClient:
        if self._jwks_client is None:
            self._jwks_client = jwt.PyJWKClient(
                self.config.jwks_url,
                cache_keys=True,
                lifespan=self.config.jwks_cache_lifespan,
            )
        return self._jwks_client

    def _decode(self, token: str) -> Dict[str, Any]:
        header = jwt.get_unverified_header(token)
        algorithm = header.get("alg")
        options = {"require": ["exp", "sub"]}
        audience = self.config.jwt_audience or None
        if not audience:
            options["verify_aud"] = False

        if algorithm == "HS256":
            if not self.config.jwt_secret:
                raise jwt.InvalidAlgorithmError("HS256 tokens are not accepted")
            return jwt.decode(
                token,
                self.config.jwt_secret,
                algorithms=["HS256"],
                audience=audience,
                options=options,
            )

        signing_key = self.jwks_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience=audience,
            options=options,
        )

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a bearer token and extract the caller

        Args:
            token: JWT token string

        Returns:
            Dictionary with verification result, payload and user
        """
        try:
            payload = self._decode(token)
            user = claims_to_user(payload)
            return {
                "valid": True,
                "payload": payload,
                "user": user,
                "expires_at": datetime.fromtimestamp(payload.get("exp", 0), tz=timezone.utc),
            }
        except jwt.ExpiredSignatureError:
            return {"valid": False, "error": "Token has expired"}
        except jwt.InvalidAudienceError:
            return {"valid": False, "error": "Invalid token audience"}
        except jwt.PyJWKClientError as e:
            logger.error(f"Failed to fetch signing key: {e}")
            return {"valid": False, "error": "Unable to verify token signature"}
        except jwt.InvalidTokenError as e:
            return {"valid": False, "error": f"Invalid token: {str(e)}"}
        except ValueError as e:
            return {"valid": False, "error": str(e)}


_jwt_manager: Optional[JWTManager] = None


def get_jwt_manager(config: Optional[SupabaseConfig] = None) -> JWTManager:
    """Get the shared JWT manager"""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager(config)
    return _jwt_manager
