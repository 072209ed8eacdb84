"""
Post API endpoints.

Listing and reading are public; an authenticated viewer additionally gets
`is_starred` on every post. Writes live under /private.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from store import Store, get_store

from . import schemas, service

router = APIRouter()
private_router = APIRouter(
    prefix="/private",
    dependencies=[Depends(auth_dependencies.get_current_user)],
)


@router.get("/posts")
async def list_posts(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    viewer: dict | None = Depends(auth_dependencies.get_optional_user),
    store: Store = Depends(get_store),
) -> dict:
    items = await service.list_posts(store, viewer=viewer, limit=limit, offset=offset)
    return {"items": items, "limit": limit, "offset": offset, "count": len(items)}


@router.get("/posts/{post_id}")
async def get_post(
    post_id: int,
    viewer: dict | None = Depends(auth_dependencies.get_optional_user),
    store: Store = Depends(get_store),
) -> dict:
    return {"item": await service.get_post(store, post_id, viewer=viewer)}


@router.get("/user/{user_id}/posts")
async def list_user_posts(
    user_id: int,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    viewer: dict | None = Depends(auth_dependencies.get_optional_user),
    store: Store = Depends(get_store),
) -> dict:
    items = await service.list_posts_by_author(
        store,
        user_id,
        viewer=viewer,
        limit=limit,
        offset=offset,
    )
    return {"items": items, "limit": limit, "offset": offset, "count": len(items)}


@private_router.post("/posts", status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: schemas.PostWriteRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    store: Store = Depends(get_store),
) -> dict:
    return await service.create_post(store, payload, author=current_user)


@private_router.get("/posts/{post_id}")
async def get_private_post(
    post_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    store: Store = Depends(get_store),
) -> dict:
    return {"item": await service.get_post(store, post_id, viewer=current_user)}


@private_router.put("/posts/{post_id}")
async def update_post(
    post_id: int,
    payload: schemas.PostWriteRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    store: Store = Depends(get_store),
) -> dict:
    return await service.update_post(store, post_id, payload, user=current_user)


@private_router.delete("/posts/{post_id}")
async def delete_post(
    post_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    store: Store = Depends(get_store),
) -> dict:
    return await service.delete_post(store, post_id, user=current_user)
