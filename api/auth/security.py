"""
Password hashing (bcrypt) and the signed session cookie (HS256 JWT).
"""

from __future__ import annotations

import base64
import hashlib
import time
from typing import Any

import bcrypt
import jwt

from core import config

SESSION_TOKEN_TYPE = "session"
JWT_ALGORITHM = "HS256"


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def _bcrypt_input(plain_password: str) -> bytes:
    """
    bcrypt only reads the first 72 bytes (and bcrypt>=5 refuses longer input),
    so passwords are reduced to a fixed 44-byte sha256 digest first.
    """
    digest = hashlib.sha256(plain_password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(plain_password: str) -> str:
    if not plain_password:
        raise AuthSecurityError("Password is empty.")
    hashed = bcrypt.hashpw(_bcrypt_input(plain_password), bcrypt.gensalt())
    return hashed.decode("ascii")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_bcrypt_input(plain_password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def session_max_age_s() -> int:
    return config.session_max_age_days() * 24 * 60 * 60


def build_session_token(*, user_id: int) -> str:
    issued_at = now_epoch_s()
    payload = {
        "sub": str(user_id),
        "type": SESSION_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + session_max_age_s(),
    }
    return jwt.encode(payload, config.session_key(), algorithm=JWT_ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Verify the cookie value and return its claims.

    Signature, expiry and the "session" type claim are all checked. Callers
    treat any AuthSecurityError as an anonymous request.
    """
    if not token or not token.strip():
        raise AuthSecurityError("Session token is empty.")

    try:
        claims = jwt.decode(
            token.strip(),
            config.session_key(),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError(f"Invalid session token: {exc}") from exc

    if claims.get("type") != SESSION_TOKEN_TYPE:
        raise AuthSecurityError("Token is not a session token.")
    return claims


def session_user_id(token: str) -> int:
    payload = decode_session_token(token)
    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise AuthSecurityError("Invalid session subject.")
    return int(subject)
