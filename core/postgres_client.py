"""
PostgreSQL Client Wrapper

Centralized asyncpg pool wrapper shared by every repository. Provides the
query/query_row/execute surface the repositories use and an explicit
transaction scope: statements issued inside ``transaction()`` by the same
task run on the transaction's connection.

Usage:
    from core.postgres_client import PostgresClientWrapper

    db = PostgresClientWrapper(config.database)

    async with db:
        rows = await db.query("SELECT * FROM orders WHERE store_id = $1", [store_id])

    async with db.transaction():
        row = await db.query_row("SELECT * FROM batches WHERE id = $1 FOR UPDATE", [batch_id])
        await db.execute("UPDATE batches SET current_quantity = $1 WHERE id = $2", [qty, batch_id])
"""

import json
import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, AsyncIterator, Dict, List, Optional

import asyncpg

from core.config import DatabaseConfig

logger = logging.getLogger(__name__)


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode json/jsonb columns into Python objects"""
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog",
        )


class PostgresClientWrapper:
    """
    PostgreSQL client wrapper over an asyncpg pool.

    The pool is created lazily on first use so the wrapper can be built at
    import time and connected during application startup.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or DatabaseConfig.from_env()
        self._pool: Optional[asyncpg.Pool] = None
        self._tx_conn: ContextVar[Optional[asyncpg.Connection]] = ContextVar(
            f"postgres_tx_{id(self)}", default=None
        )

    async def connect(self) -> None:
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            dsn=self.config.dsn,
            min_size=self.config.pool_min_size,
            max_size=self.config.pool_max_size,
            command_timeout=self.config.command_timeout,
            init=_init_connection,
        )
        logger.info(
            f"PostgreSQL pool ready: {self.config.postgres_host}:{self.config.postgres_port}"
            f"/{self.config.postgres_db} (max={self.config.pool_max_size})"
        )

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """Run the enclosed statements in one transaction.

        Nested scopes become savepoints on the outer connection.
        """
        current = self._tx_conn.get()
        if current is not None:
            async with current.transaction():
                yield current
            return

        await self.connect()
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                token = self._tx_conn.set(conn)
                try:
                    yield conn
                finally:
                    self._tx_conn.reset(token)

    async def _call(self, method: str, sql: str, params: Optional[List[Any]]):
        args = params or []
        conn = self._tx_conn.get()
        if conn is not None:
            return await getattr(conn, method)(sql, *args)
        await self.connect()
        async with self._pool.acquire() as conn:
            return await getattr(conn, method)(sql, *args)

    async def health_check(self) -> Optional[Dict]:
        """Check database health"""
        try:
            value = await self._call("fetchval", "SELECT 1", None)
            return {"healthy": value == 1}
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return None

    async def query(self, sql: str, params: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
        """Execute query and return results"""
        records = await self._call("fetch", sql, params)
        return [dict(r) for r in records]

    async def query_row(self, sql: str, params: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute query and return single row"""
        record = await self._call("fetchrow", sql, params)
        return dict(record) if record is not None else None

    async def query_value(self, sql: str, params: Optional[List[Any]] = None) -> Any:
        """Execute query and return the first column of the first row"""
        return await self._call("fetchval", sql, params)

    async def execute(self, sql: str, params: Optional[List[Any]] = None) -> int:
        """Execute SQL statement, returning the affected row count"""
        status = await self._call("execute", sql, params)
        try:
            return int(status.split()[-1])
        except (AttributeError, IndexError, ValueError):
            return 0

    async def close(self):
        """Close the pool"""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL pool closed")


def build_set_clause(fields: Dict[str, Any], start: int = 1) -> tuple:
    """
    Build ``col = $n`` assignments for an UPDATE.

    Column names must come from code, never from request input.

    Returns:
        (clause, params) where params are in placeholder order
    """
    assignments = []
    params = []
    for index, (column, value) in enumerate(fields.items(), start=start):
        assignments.append(f"{column} = ${index}")
        params.append(value)
    return ", ".join(assignments), params
