"""
Auth dependencies for FastAPI routes.

`get_optional_user` authenticates: it resolves the session cookie to a user
row, or None for anonymous requests. `get_current_user` authorizes: routes
that need an identity depend on it and get 401 without one.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from core import config
from core.errors import MSG_NOT_AUTHENTICATED
from store import Store, get_store

from . import service


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(config.session_cookie_name())


async def get_optional_user(
    request: Request,
    store: Store = Depends(get_store),
) -> dict | None:
    user = await service.get_user_from_session_token(store, get_session_token(request))
    request.state.user = user
    return user


async def get_current_user(user: dict | None = Depends(get_optional_user)) -> dict:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MSG_NOT_AUTHENTICATED,
        )
    return user
