"""
Auth business logic: signup, login and session resolution.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.errors import MSG_INCORRECT_EMAIL_OR_PASSWORD, RecordNotFoundError
from store import Store

from . import schemas, security

logger = logging.getLogger(__name__)


def to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        username=str(user_row["username"]),
        email=str(user_row["email"]),
    )


def to_public_user_response(user_row: dict) -> schemas.PublicUserResponse:
    return schemas.PublicUserResponse(
        id=int(user_row["id"]),
        username=str(user_row["username"]),
    )


async def signup(store: Store, payload: schemas.SignupRequest) -> schemas.UserResponse:
    # Duplicate emails surface as DuplicateEmailError from the unique index.
    password_hash = security.hash_password(payload.password)
    user_row = await store.users.create(
        username=payload.username,
        email=str(payload.email),
        encrypted_password=password_hash,
    )
    logger.info("user_created user_id=%s", user_row["id"])
    return to_user_response(user_row)


async def login(store: Store, payload: schemas.LoginRequest) -> tuple[schemas.UserResponse, str]:
    """
    Check credentials and return the user plus a fresh session token.

    Unknown email and wrong password produce the same error.
    """
    try:
        user_row = await store.users.find_by_email(payload.email)
    except RecordNotFoundError:
        user_row = None

    if user_row is None or not security.verify_password(
        payload.password, str(user_row.get("encrypted_password") or "")
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MSG_INCORRECT_EMAIL_OR_PASSWORD,
        )

    token = security.build_session_token(user_id=int(user_row["id"]))
    return to_user_response(user_row), token


async def get_user_from_session_token(store: Store, token: str | None) -> dict | None:
    if not token:
        return None

    try:
        user_id = security.session_user_id(token)
    except security.AuthSecurityError as exc:
        logger.debug("session_rejected reason=%s", exc)
        return None

    try:
        return await store.users.find(user_id)
    except RecordNotFoundError:
        logger.debug("session_user_missing user_id=%s", user_id)
        return None


async def get_public_user(store: Store, user_id: int) -> schemas.PublicUserResponse:
    user_row = await store.users.find(user_id)
    return to_public_user_response(user_row)
