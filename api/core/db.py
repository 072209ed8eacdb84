"""
Async database access (raw SQL) using asyncpg.

`Database` owns the connection pool. The app creates one instance in its
lifespan, connects it before serving, and closes it on shutdown (see
`api/main.py`). Repositories receive the instance explicitly.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import config


# libpq-only query parameters that asyncpg's DSN parser refuses.
_LIBPQ_ONLY_PARAMS = frozenset({"sslmode"})


def _sanitize_database_url(url: str) -> str:
    """
    DATABASE_URL is shared with alembic (libpq via psycopg2), so it may carry
    parameters asyncpg does not accept. Those are dropped; the rest is kept
    in order.
    """
    scheme, netloc, path, query, fragment = urlsplit(url)
    if not query:
        return url
    kept = [
        pair for pair in parse_qsl(query, keep_blank_values=True) if pair[0] not in _LIBPQ_ONLY_PARAMS
    ]
    return urlunsplit((scheme, netloc, path, urlencode(kept), fragment))


def database_url() -> str:
    """
    asyncpg DSN for the app pool, taken from DATABASE_URL.
    """
    raw = os.environ.get("DATABASE_URL", "").strip()
    if raw:
        return _sanitize_database_url(raw)
    raise RuntimeError("DATABASE_URL is not set.")


def _as_row(record: asyncpg.Record | None) -> dict[str, Any] | None:
    return None if record is None else dict(record)


class Database:
    def __init__(self, dsn: str | None = None) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn or database_url(),
            min_size=config.db_pool_min_size(),
            max_size=config.db_pool_max_size(),
            command_timeout=config.db_command_timeout_s(),
        )

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database is not connected; await connect() first.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        return _as_row(await self.pool.fetchrow(sql, *args))

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Rows come back as plain dicts so repositories never leak asyncpg.Record.
        """
        return [dict(record) for record in await self.pool.fetch(sql, *args)]

    async def fetch_val(self, sql: str, *args: Any) -> Any:
        return await self.pool.fetchval(sql, *args)

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Returns the status tag ("UPDATE 1", "DELETE 0"); see affected_rows().
        """
        return await self.pool.execute(sql, *args)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        async with self.pool.acquire() as conn:  # type: asyncpg.Connection
            async with conn.transaction():
                yield conn


def affected_rows(status_tag: str) -> int:
    """
    Parse the row count out of an asyncpg status tag ("DELETE 3" -> 3).
    """
    try:
        return int((status_tag or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0
