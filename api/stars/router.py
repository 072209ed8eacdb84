"""
Star API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from auth import dependencies as auth_dependencies
from store import Store, get_store

from . import service

private_router = APIRouter(
    prefix="/private",
    dependencies=[Depends(auth_dependencies.get_current_user)],
)


@private_router.post("/posts/{post_id}/star")
async def give_star(
    post_id: int,
    response: Response,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    store: Store = Depends(get_store),
) -> dict:
    code, payload = await service.give_star(store, post_id, starer=current_user)
    response.status_code = code
    return payload


@private_router.delete("/posts/{post_id}/star")
async def take_star(
    post_id: int,
    response: Response,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    store: Store = Depends(get_store),
) -> dict:
    code, payload = await service.take_star(store, post_id, starer=current_user)
    response.status_code = code
    return payload
