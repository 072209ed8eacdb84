"""
Star persistence (raw SQL).

Uniqueness of (starer_id, post_id) is enforced by the schema, so `create`
is a single conflict-tolerant insert.
"""

from __future__ import annotations

import asyncpg

from core.db import Database, affected_rows
from core.errors import RecordNotFoundError


class StarRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, *, starer_id: int, post_id: int) -> int | None:
        """
        Star a post. Returns the new star id, or None if it was already starred.
        """
        try:
            row = await self._db.fetch_one(
                """
                INSERT INTO stars (starer_id, post_id)
                VALUES ($1, $2)
                ON CONFLICT (starer_id, post_id) DO NOTHING
                RETURNING id
                """,
                starer_id,
                post_id,
            )
        except asyncpg.ForeignKeyViolationError as exc:
            raise RecordNotFoundError() from exc
        return int(row["id"]) if row is not None else None

    async def delete(self, *, starer_id: int, post_id: int) -> bool:
        status_tag = await self._db.execute(
            "DELETE FROM stars WHERE starer_id = $1 AND post_id = $2",
            starer_id,
            post_id,
        )
        return affected_rows(status_tag) > 0

    async def find(self, *, starer_id: int, post_id: int) -> dict | None:
        return await self._db.fetch_one(
            """
            SELECT id, starer_id, post_id, created_at
            FROM stars
            WHERE starer_id = $1 AND post_id = $2
            """,
            starer_id,
            post_id,
        )

