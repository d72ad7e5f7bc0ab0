"""
Shared plumbing for asyncpg-backed repositories.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import asyncpg

from bridgeyou.db import get_pg_pool
from bridgeyou.error_handling import DatabaseQueryError

logger = logging.getLogger(__name__)

# Failures that mean "the store could not answer"
DATABASE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class Repository:
    """Base repository bound to a connection pool (the global one by default)."""

    def __init__(self, pool: Optional[asyncpg.Pool] = None):
        self._pool = pool

    @property
    def pool(self) -> asyncpg.Pool:
        return self._pool or get_pg_pool()

    @asynccontextmanager
    async def connection(self, operation: str):
        """
        Acquire a connection, re-raising store failures as DatabaseQueryError.

        Args:
            operation: Name used in logs and in the raised error
        """
        try:
            async with self.pool.acquire() as conn:
                yield conn
        except DATABASE_ERRORS as e:
            logger.error(f"Database error during {operation}: {e}")
            raise DatabaseQueryError(str(e), operation=operation) from e
