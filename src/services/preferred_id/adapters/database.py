"""
Database adapter for preferred-id resolution.

Handles PostgreSQL connection pool management and resource search.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ..core.exceptions import SearchProviderError
from ..core.protocols import SearchOptions, SearchQuery

if TYPE_CHECKING:
    import asyncpg

logger = logging.getLogger(__name__)

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


async def create_db_pool(
    postgres_url: str,
    min_size: int = 2,
    max_size: int = 10,
) -> asyncpg.Pool:
    """
    Create a PostgreSQL connection pool.

    Args:
        postgres_url: Connection URL
        min_size: Minimum connections
        max_size: Maximum connections

    Returns:
        asyncpg connection pool
    """
    import asyncpg

    logger.info(f"Creating database pool (min={min_size}, max={max_size})")
    pool = await asyncpg.create_pool(
        postgres_url,
        min_size=min_size,
        max_size=max_size,
    )
    logger.info("Database pool created")
    return pool


async def check_db_health(pool: asyncpg.Pool) -> dict:
    """
    Check database health.

    Returns:
        Health status dict
    """
    try:
        async with pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
        return {"connected": True, "pool_size": pool.get_size()}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"connected": False, "error": str(e)}


class PostgresSearchProvider:
    """
    Search provider reading FHIR JSON resources from PostgreSQL.

    Expects a table with ``resource_type``, ``resource_id``, ``is_deleted``
    and a JSON/JSONB ``resource`` column holding the current version of
    each resource.
    """

    def __init__(self, pool: asyncpg.Pool, table: str = "fhir_resources"):
        if not _TABLE_NAME.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self._pool = pool
        self._table = table

    async def search(
        self,
        query: SearchQuery,
        options: SearchOptions,
    ) -> Sequence[dict[str, Any]]:
        """
        Fetch all live resources of the queried type.

        Raises:
            SearchProviderError: If the database query fails
        """
        import asyncpg

        sql = (
            f"SELECT resource FROM {self._table} "
            "WHERE resource_type = $1 AND is_deleted = FALSE "
            "ORDER BY resource_id"
        )
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(sql, query.resource_type)
        except (asyncpg.PostgresError, OSError) as e:
            raise SearchProviderError("postgres", str(e)) from e

        logger.debug(
            f"Fetched {len(rows)} {query.resource_type} rows "
            f"(model={options.information_model}, base={options.server_base})"
        )
        return [_as_record(row["resource"]) for row in rows]

    async def check_health(self) -> dict:
        return await check_db_health(self._pool)

    async def close(self) -> None:
        await self._pool.close()


def _as_record(value: Any) -> dict[str, Any]:
    # asyncpg returns json/jsonb columns as text unless a codec is registered
    if isinstance(value, str):
        return json.loads(value)
    return dict(value)
