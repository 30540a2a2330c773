"""
Database helper functions for common patterns.
Reduces boilerplate in the repository layer.

Every helper takes the pool manager explicitly (``db=``) so repositories stay
bound to whatever client they were constructed with.
"""

from typing import Any

import psycopg
from psycopg import errors as pg_errors
from psycopg import sql

from app.db.pool import DatabasePoolManager
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

Query = str | sql.Composable


class DatabaseError(Exception):
    """Custom exception for database operations."""

    def __init__(self, message: str, operation: str = "unknown", recoverable: bool = True):
        super().__init__(message)
        self.operation = operation
        self.recoverable = recoverable


class UniqueViolationError(DatabaseError):
    """A unique constraint rejected the write."""

    def __init__(self, message: str, operation: str = "unknown", constraint: str | None = None):
        super().__init__(message, operation=operation, recoverable=False)
        self.constraint = constraint


def _translate(e: psycopg.Error, query: Query, operation: str) -> DatabaseError:
    if isinstance(e, pg_errors.UniqueViolation):
        constraint = getattr(getattr(e, "diag", None), "constraint_name", None)
        logger.info("Unique constraint rejected write", operation=operation, constraint=constraint)
        return UniqueViolationError(f"Duplicate record: {e}", operation=operation, constraint=constraint)

    logger.error(f"Database {operation} error", query=str(query)[:100], error=str(e))
    return DatabaseError(f"Query failed: {e}", operation=operation)


async def fetch_one(
    query: Query, params: tuple = (), *, db: DatabasePoolManager
) -> dict[str, Any] | None:
    """
    Execute query and return single row as dict.

    Args:
        query: SQL query with %s placeholders
        params: Query parameters
        db: Pool manager to borrow a connection from

    Returns:
        Dict with row data or None if no results
    """
    try:
        async with db.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(query, params)
                row = await cur.fetchone()
                return row if row else None

    except psycopg.Error as e:
        raise _translate(e, query, "fetch_one") from e


async def fetch_all(
    query: Query, params: tuple = (), *, db: DatabasePoolManager
) -> list[dict[str, Any]]:
    """
    Execute query and return all rows as list of dicts.
    """
    try:
        async with db.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(query, params)
                return await cur.fetchall()

    except psycopg.Error as e:
        raise _translate(e, query, "fetch_all") from e


async def fetch_val(query: Query, params: tuple = (), *, db: DatabasePoolManager) -> Any:
    """
    Execute query and return the first column of the first row.
    """
    try:
        async with db.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(query, params)
                row = await cur.fetchone()
                return list(row.values())[0] if row else None

    except psycopg.Error as e:
        raise _translate(e, query, "fetch_val") from e


async def execute_query(query: Query, params: tuple = (), *, db: DatabasePoolManager) -> int:
    """
    Execute query and return number of affected rows.
    """
    try:
        async with db.connection() as conn:
            cursor = await conn.execute(query, params)
            return cursor.rowcount

    except psycopg.Error as e:
        raise _translate(e, query, "execute") from e
