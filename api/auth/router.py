"""
Account and session API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from core import config
from store import Store, get_store

from . import dependencies as auth_dependencies
from . import schemas, security, service

router = APIRouter()
private_router = APIRouter(
    prefix="/private",
    dependencies=[Depends(auth_dependencies.get_current_user)],
)


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: schemas.SignupRequest,
    store: Store = Depends(get_store),
) -> schemas.UserResponse:
    return await service.signup(store, payload)


@router.post("/sessions")
async def create_session(
    payload: schemas.LoginRequest,
    response: Response,
    store: Store = Depends(get_store),
) -> schemas.UserResponse:
    user, token = await service.login(store, payload)
    response.set_cookie(
        key=config.session_cookie_name(),
        value=token,
        # Without remember-me the cookie lives for the browser session only.
        max_age=security.session_max_age_s() if payload.remember_me else None,
        httponly=True,
        samesite="lax",
        secure=config.session_cookie_secure(),
    )
    return user


@router.delete("/sessions")
async def delete_session(response: Response) -> dict:
    response.delete_cookie(
        key=config.session_cookie_name(),
        httponly=True,
        samesite="lax",
        secure=config.session_cookie_secure(),
    )
    return {"ok": True}


@router.get("/user/{user_id}")
async def get_user(
    user_id: int,
    store: Store = Depends(get_store),
) -> dict:
    user = await service.get_public_user(store, user_id)
    return {"user": user}


@private_router.get("/whoami")
async def whoami(
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.UserResponse:
    return service.to_user_response(current_user)
