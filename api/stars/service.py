"""
Star business logic.

Giving and taking a star are both idempotent: repeating either one returns
the current state with 202 Accepted instead of failing.
"""

from __future__ import annotations

import logging

from fastapi import status

from store import Store

logger = logging.getLogger(__name__)


async def _star_payload(store: Store, *, star_id: int | None, starer: dict, post_id: int) -> dict:
    starer_id = int(starer["id"])
    return {
        "id": star_id,
        "starer": {"id": starer_id, "username": str(starer["username"])},
        "post": {
            "id": post_id,
            "stars_count": await store.posts.get_stars_count(post_id),
            "is_starred": await store.posts.is_starred_by_user(starer_id, post_id),
        },
    }


async def give_star(store: Store, post_id: int, *, starer: dict) -> tuple[int, dict]:
    """
    Returns (http_status, payload).
    """
    starer_id = int(starer["id"])
    star_id = await store.stars.create(starer_id=starer_id, post_id=post_id)
    if star_id is None:
        existing = await store.stars.find(starer_id=starer_id, post_id=post_id)
        star_id = int(existing["id"]) if existing is not None else None
        code = status.HTTP_202_ACCEPTED
    else:
        logger.info("star_given post_id=%s user_id=%s", post_id, starer_id)
        code = status.HTTP_201_CREATED

    return code, await _star_payload(store, star_id=star_id, starer=starer, post_id=post_id)


async def take_star(store: Store, post_id: int, *, starer: dict) -> tuple[int, dict]:
    """
    Returns (http_status, payload).
    """
    starer_id = int(starer["id"])
    removed = await store.stars.delete(starer_id=starer_id, post_id=post_id)
    if removed:
        logger.info("star_taken post_id=%s user_id=%s", post_id, starer_id)
        code = status.HTTP_200_OK
    else:
        code = status.HTTP_202_ACCEPTED

    return code, await _star_payload(store, star_id=None, starer=starer, post_id=post_id)
