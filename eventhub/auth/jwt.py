from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone

import jwt
from jwt import ExpiredSignatureError, PyJWTError

from eventhub.core.config import settings
from eventhub.services.exceptions import AuthError

TOKEN_EXPIRED_MESSAGE = "Your token has expired. Please log in again."
TOKEN_INVALID_MESSAGE = "Invalid token. Please log in again."


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(user_id: int, ttl_seconds: int | None = None) -> str:
    now = _now()
    ttl = settings.access_token_ttl_seconds if ttl_seconds is None else ttl_seconds
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> int:
    """Return the user id carried by ``token`` or raise ``AuthError``."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except ExpiredSignatureError as exc:
        raise AuthError(TOKEN_EXPIRED_MESSAGE, code="TOKEN_EXPIRED") from exc
    except PyJWTError as exc:
        raise AuthError(TOKEN_INVALID_MESSAGE, code="TOKEN_INVALID") from exc

    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise AuthError(TOKEN_INVALID_MESSAGE, code="TOKEN_INVALID") from exc


def create_reset_token() -> str:
    return secrets.token_urlsafe(32)
