#!/usr/bin/env python3
"""Top level application configuration

Combines the server settings with the database, auth provider and logging
sections.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from .database_config import DatabaseConfig
from .logging_config import LoggingConfig
from .supabase_config import SupabaseConfig

def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _optional_int(val: Optional[str]) -> Optional[int]:
    try:
        return int(val) if val else None
    except ValueError:
        return None


@dataclass
class AppConfig:
    """Kitchen API configuration"""

    service_name: str = "kitchen_api"
    version: str = "1.0.0"
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3001
    debug: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # Store that owns central kitchen stock; enables the inventory ledger
    central_kitchen_store_id: Optional[int] = None

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    supabase: SupabaseConfig = field(default_factory=SupabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load configuration from environment variables"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            service_name=os.getenv("SERVICE_NAME", "kitchen_api"),
            version=os.getenv("SERVICE_VERSION", "1.0.0"),
            environment=env,
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=_int(os.getenv("API_PORT", "3001"), 3001),
            debug=_bool(os.getenv("DEBUG", "false")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            central_kitchen_store_id=_optional_int(os.getenv("CENTRAL_KITCHEN_STORE_ID")),
            database=DatabaseConfig.from_env(),
            supabase=SupabaseConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )
