"""
User persistence (raw SQL).
"""

from __future__ import annotations

import asyncpg

from core.db import Database
from core.errors import DuplicateEmailError, RecordNotFoundError

_USER_COLUMNS = "id, username, email, encrypted_password"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, *, username: str, email: str, encrypted_password: str) -> dict:
        try:
            row = await self._db.fetch_one(
                f"""
                INSERT INTO users (username, email, encrypted_password)
                VALUES ($1, $2, $3)
                RETURNING {_USER_COLUMNS}
                """,
                username,
                normalize_email(email),
                encrypted_password,
            )
        except asyncpg.UniqueViolationError as exc:
            raise DuplicateEmailError() from exc
        if row is None:
            raise RuntimeError("Failed to create user.")
        return row

    async def find(self, user_id: int) -> dict:
        row = await self._db.fetch_one(
            f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE id = $1
            """,
            user_id,
        )
        if row is None:
            raise RecordNotFoundError()
        return row

    async def find_by_email(self, email: str) -> dict:
        row = await self._db.fetch_one(
            f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE email = $1
            """,
            normalize_email(email),
        )
        if row is None:
            raise RecordNotFoundError()
        return row
