"""
Test fixtures.

The app runs against in-memory repositories that mirror the SQL ones, so
no database is needed. TestClient keeps cookies, so each client is one
browser session.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from auth.repository import normalize_email
from core.errors import DuplicateEmailError, RecordNotFoundError
from main import create_app
from store import Store

VALID_HEADER = "A perfectly fine post header"
VALID_TEXT = "Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 3


@dataclass
class MemoryTables:
    users: dict[int, dict] = field(default_factory=dict)
    posts: dict[int, dict] = field(default_factory=dict)
    stars: dict[int, dict] = field(default_factory=dict)
    ids: itertools.count = field(default_factory=lambda: itertools.count(1))


class MemoryUserRepository:
    def __init__(self, tables: MemoryTables) -> None:
        self._t = tables

    async def create(self, *, username: str, email: str, encrypted_password: str) -> dict:
        email = normalize_email(email)
        if any(u["email"] == email for u in self._t.users.values()):
            raise DuplicateEmailError()
        row = {
            "id": next(self._t.ids),
            "username": username,
            "email": email,
            "encrypted_password": encrypted_password,
        }
        self._t.users[row["id"]] = row
        return dict(row)

    async def find(self, user_id: int) -> dict:
        if user_id not in self._t.users:
            raise RecordNotFoundError()
        return dict(self._t.users[user_id])

    async def find_by_email(self, email: str) -> dict:
        email = normalize_email(email)
        for row in self._t.users.values():
            if row["email"] == email:
                return dict(row)
        raise RecordNotFoundError()


class MemoryPostRepository:
    def __init__(self, tables: MemoryTables) -> None:
        self._t = tables

    def _row(self, post: dict, viewer_id: int | None) -> dict:
        author = self._t.users[post["author_id"]]
        stars = [s for s in self._t.stars.values() if s["post_id"] == post["id"]]
        return {
            **post,
            "author_username": author["username"],
            "stars_count": len(stars),
            "is_starred": any(s["starer_id"] == viewer_id for s in stars),
        }

    async def create(self, *, author_id: int, header: str, text_post: str) -> dict:
        post = {
            "id": next(self._t.ids),
            "author_id": author_id,
            "header": header,
            "text_post": text_post,
            "created_at": datetime.now(timezone.utc),
        }
        self._t.posts[post["id"]] = post
        return self._row(post, author_id)

    async def find(self, post_id: int, *, viewer_id: int | None = None) -> dict:
        if post_id not in self._t.posts:
            raise RecordNotFoundError()
        return self._row(self._t.posts[post_id], viewer_id)

    async def find_all(self, *, viewer_id: int | None = None, limit: int = 100, offset: int = 0) -> list[dict]:
        posts = sorted(self._t.posts.values(), key=lambda p: p["id"], reverse=True)
        return [self._row(p, viewer_id) for p in posts[offset : offset + limit]]

    async def find_by_author(
        self,
        author_id: int,
        *,
        viewer_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict]:
        posts = sorted(
            (p for p in self._t.posts.values() if p["author_id"] == author_id),
            key=lambda p: p["id"],
            reverse=True,
        )
        return [self._row(p, viewer_id) for p in posts[offset : offset + limit]]

    async def update(self, post_id: int, *, header: str, text_post: str) -> None:
        if post_id not in self._t.posts:
            raise RecordNotFoundError()
        self._t.posts[post_id].update(header=header, text_post=text_post)

    async def delete(self, post_id: int) -> None:
        for star_id in [k for k, s in self._t.stars.items() if s["post_id"] == post_id]:
            del self._t.stars[star_id]
        if self._t.posts.pop(post_id, None) is None:
            raise RecordNotFoundError()

    async def is_starred_by_user(self, user_id: int, post_id: int) -> bool:
        return any(s["starer_id"] == user_id and s["post_id"] == post_id for s in self._t.stars.values())

    async def get_stars_count(self, post_id: int) -> int:
        return sum(1 for s in self._t.stars.values() if s["post_id"] == post_id)


class MemoryStarRepository:
    def __init__(self, tables: MemoryTables) -> None:
        self._t = tables

    async def create(self, *, starer_id: int, post_id: int) -> int | None:
        if post_id not in self._t.posts:
            raise RecordNotFoundError()
        if await self.find(starer_id=starer_id, post_id=post_id) is not None:
            return None
        star = {"id": next(self._t.ids), "starer_id": starer_id, "post_id": post_id}
        self._t.stars[star["id"]] = star
        return star["id"]

    async def delete(self, *, starer_id: int, post_id: int) -> bool:
        existing = await self.find(starer_id=starer_id, post_id=post_id)
        if existing is None:
            return False
        del self._t.stars[existing["id"]]
        return True

    async def find(self, *, starer_id: int, post_id: int) -> dict | None:
        for star in self._t.stars.values():
            if star["starer_id"] == starer_id and star["post_id"] == post_id:
                return dict(star)
        return None


@pytest.fixture
def tables() -> MemoryTables:
    return MemoryTables()


@pytest.fixture
def store(tables) -> Store:
    return Store(
        users=MemoryUserRepository(tables),
        posts=MemoryPostRepository(tables),
        stars=MemoryStarRepository(tables),
    )


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest.fixture
def make_client(app):
    def _make() -> TestClient:
        return TestClient(app, raise_server_exceptions=False)

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


def signup(client: TestClient, *, username: str, email: str, password: str = "secret123") -> dict:
    resp = client.post("/users", json={"username": username, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()


def login(client: TestClient, *, email: str, password: str = "secret123", remember_me: bool = False):
    return client.post("/sessions", json={"email": email, "password": password, "rememberMe": remember_me})


@pytest.fixture
def make_user(make_client):
    """
    Create an account and return (logged-in client, user payload).
    """
    counter = itertools.count(1)

    def _make(username: str | None = None) -> tuple[TestClient, dict]:
        n = next(counter)
        username = username or f"user{n}"
        email = f"{username}@example.com"
        c = make_client()
        user = signup(c, username=username, email=email)
        resp = login(c, email=email)
        assert resp.status_code == 200, resp.text
        return c, user

    return _make


def create_post(client: TestClient, *, header: str = VALID_HEADER, text_post: str = VALID_TEXT) -> dict:
    resp = client.post("/private/posts", json={"header": header, "text_post": text_post})
    assert resp.status_code == 201, resp.text
    return resp.json()
