"""
Post persistence (raw SQL).

Rows carry the author inline (`author_id`, `author_username`) plus the
derived `stars_count` and `is_starred` columns. `is_starred` is computed for
`viewer_id`; it is always false when there is no viewer.
"""

from __future__ import annotations

from core.db import Database, affected_rows
from core.errors import RecordNotFoundError

_POST_SELECT = """
    SELECT
      p.id,
      p.header,
      p.text_post,
      p.created_at,
      u.id AS author_id,
      u.username AS author_username,
      (SELECT COUNT(*) FROM stars s WHERE s.post_id = p.id)::int AS stars_count,
      EXISTS (
        SELECT 1 FROM stars s WHERE s.post_id = p.id AND s.starer_id = $1
      ) AS is_starred
    FROM posts p
    JOIN users u ON u.id = p.author_id
"""


class PostRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, *, author_id: int, header: str, text_post: str) -> dict:
        row = await self._db.fetch_one(
            """
            INSERT INTO posts (author_id, header, text_post)
            VALUES ($1, $2, $3)
            RETURNING id
            """,
            author_id,
            header,
            text_post,
        )
        if row is None:
            raise RuntimeError("Failed to create post.")
        return await self.find(int(row["id"]), viewer_id=author_id)

    async def find(self, post_id: int, *, viewer_id: int | None = None) -> dict:
        row = await self._db.fetch_one(
            _POST_SELECT + "WHERE p.id = $2",
            viewer_id,
            post_id,
        )
        if row is None:
            raise RecordNotFoundError()
        return row

    async def find_all(
        self,
        *,
        viewer_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict]:
        return await self._db.fetch_all(
            _POST_SELECT + "ORDER BY p.id DESC LIMIT $2 OFFSET $3",
            viewer_id,
            limit,
            offset,
        )

    async def find_by_author(
        self,
        author_id: int,
        *,
        viewer_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict]:
        return await self._db.fetch_all(
            _POST_SELECT + "WHERE p.author_id = $2 ORDER BY p.id DESC LIMIT $3 OFFSET $4",
            viewer_id,
            author_id,
            limit,
            offset,
        )

    async def update(self, post_id: int, *, header: str, text_post: str) -> None:
        status_tag = await self._db.execute(
            """
            UPDATE posts
            SET header = $1,
                text_post = $2
            WHERE id = $3
            """,
            header,
            text_post,
            post_id,
        )
        if affected_rows(status_tag) == 0:
            raise RecordNotFoundError()

    async def delete(self, post_id: int) -> None:
        """
        Delete a post and its stars in a single transaction.
        """
        async with self._db.transaction() as conn:
            await conn.execute("DELETE FROM stars WHERE post_id = $1", post_id)
            status_tag = await conn.execute("DELETE FROM posts WHERE id = $1", post_id)
        if affected_rows(status_tag) == 0:
            raise RecordNotFoundError()

    async def is_starred_by_user(self, user_id: int, post_id: int) -> bool:
        value = await self._db.fetch_val(
            """
            SELECT EXISTS (
              SELECT 1 FROM stars WHERE starer_id = $1 AND post_id = $2
            )
            """,
            user_id,
            post_id,
        )
        return bool(value)

    async def get_stars_count(self, post_id: int) -> int:
        value = await self._db.fetch_val(
            "SELECT COUNT(*) FROM stars WHERE post_id = $1",
            post_id,
        )
        return int(value or 0)
