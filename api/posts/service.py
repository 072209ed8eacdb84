"""
Post business logic.

Scope:
- shaping post rows into API payloads
- ownership checks for update/delete
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.errors import MSG_NO_PERMISSION
from store import Store

from . import schemas

logger = logging.getLogger(__name__)


def to_post_payload(row: dict, *, viewer_id: int | None) -> dict:
    """
    `is_starred` is only meaningful for a signed-in viewer and is left out otherwise.
    """
    payload = {
        "id": int(row["id"]),
        "author": {
            "id": int(row["author_id"]),
            "username": str(row["author_username"]),
        },
        "header": str(row["header"]),
        "text_post": str(row["text_post"]),
        "created_at": row["created_at"],
        "stars_count": int(row.get("stars_count") or 0),
    }
    if viewer_id is not None:
        payload["is_starred"] = bool(row.get("is_starred", False))
    return payload


def _viewer_id(viewer: dict | None) -> int | None:
    return int(viewer["id"]) if viewer is not None else None


async def list_posts(
    store: Store,
    *,
    viewer: dict | None,
    limit: int,
    offset: int,
) -> list[dict]:
    viewer_id = _viewer_id(viewer)
    rows = await store.posts.find_all(viewer_id=viewer_id, limit=limit, offset=offset)
    return [to_post_payload(row, viewer_id=viewer_id) for row in rows]


async def list_posts_by_author(
    store: Store,
    author_id: int,
    *,
    viewer: dict | None,
    limit: int,
    offset: int,
) -> list[dict]:
    viewer_id = _viewer_id(viewer)
    rows = await store.posts.find_by_author(
        author_id,
        viewer_id=viewer_id,
        limit=limit,
        offset=offset,
    )
    return [to_post_payload(row, viewer_id=viewer_id) for row in rows]


async def get_post(store: Store, post_id: int, *, viewer: dict | None) -> dict:
    viewer_id = _viewer_id(viewer)
    row = await store.posts.find(post_id, viewer_id=viewer_id)
    return to_post_payload(row, viewer_id=viewer_id)


async def create_post(store: Store, payload: schemas.PostWriteRequest, *, author: dict) -> dict:
    author_id = int(author["id"])
    row = await store.posts.create(
        author_id=author_id,
        header=payload.header,
        text_post=payload.text_post,
    )
    logger.info("post_created post_id=%s author_id=%s", row["id"], author_id)
    return to_post_payload(row, viewer_id=author_id)


async def _load_owned_post(store: Store, post_id: int, *, user: dict) -> dict:
    user_id = int(user["id"])
    row = await store.posts.find(post_id, viewer_id=user_id)
    if int(row["author_id"]) != user_id:
        logger.warning("post_permission_denied post_id=%s user_id=%s", post_id, user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MSG_NO_PERMISSION,
        )
    return row


async def update_post(
    store: Store,
    post_id: int,
    payload: schemas.PostWriteRequest,
    *,
    user: dict,
) -> dict:
    await _load_owned_post(store, post_id, user=user)
    await store.posts.update(post_id, header=payload.header, text_post=payload.text_post)
    return await get_post(store, post_id, viewer=user)


async def delete_post(store: Store, post_id: int, *, user: dict) -> dict:
    await _load_owned_post(store, post_id, user=user)
    await store.posts.delete(post_id)
    logger.info("post_deleted post_id=%s user_id=%s", post_id, user["id"])
    return {"ok": True, "post_id": post_id}
