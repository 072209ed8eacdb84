"""
Repository wiring.

The Store is built once per process, after the DB pool is connected, and
handed to routes through the `get_store` dependency.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from auth.repository import UserRepository
from core.db import Database
from posts.repository import PostRepository
from stars.repository import StarRepository


@dataclass(frozen=True)
class Store:
    users: UserRepository
    posts: PostRepository
    stars: StarRepository

    @classmethod
    def build(cls, db: Database) -> "Store":
        return cls(
            users=UserRepository(db),
            posts=PostRepository(db),
            stars=StarRepository(db),
        )


def get_store(request: Request) -> Store:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Store is not initialized. Build it on startup.")
    return store
