"""Password reset: ``NoPendingReset -> PendingReset -> NoPendingReset``.

A request stores a random token and its expiry on the user row and mails a
link. Consuming the token sets the new password and clears both fields in the
same commit, so a token can only ever be used once.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from eventhub.auth.jwt import create_reset_token
from eventhub.auth.password import hash_password
from eventhub.core.config import settings
from eventhub.mail import Mailer
from eventhub.models import User
from eventhub.services.auth_service import normalize_email, validate_password
from eventhub.services.exceptions import DeliveryError, InvalidTokenError, NotFoundError

logger = structlog.get_logger()

RESET_EMAIL_SUBJECT = "Password Reset Request"


def _now_for_dt(value: datetime | None) -> datetime:
    now = datetime.now(timezone.utc)
    if value is not None and value.tzinfo is None:
        # SQLite hands back naive UTC datetimes.
        return now.replace(tzinfo=None)
    return now


def reset_link(token: str) -> str:
    return f"{settings.password_reset_url.rstrip('/')}/{token}"


def request_reset(db: Session, mailer: Mailer, email: str) -> str:
    user = db.scalar(select(User).where(User.email == normalize_email(email)))
    if not user:
        raise NotFoundError("User not found")

    token = create_reset_token()
    user.reset_token = token
    user.reset_token_expires_at = datetime.now(timezone.utc) + timedelta(
        seconds=settings.password_reset_ttl_seconds
    )
    db.add(user)
    db.commit()
    logger.info("password_reset_requested", user_id=user.id)

    body = f"Click on the following link to reset your password: {reset_link(token)}"
    try:
        mailer.send(user.email, RESET_EMAIL_SUBJECT, body)
    except DeliveryError:
        # The token stays stored; the user can simply request again.
        logger.warning("password_reset_email_failed", user_id=user.id)
        raise

    return token


def consume_reset(db: Session, token: str, new_password: str | None) -> User:
    user = db.scalar(select(User).where(User.reset_token == token)) if token else None
    if not user or user.reset_token_expires_at is None:
        raise InvalidTokenError()

    expires_at = user.reset_token_expires_at
    if expires_at < _now_for_dt(expires_at):
        raise InvalidTokenError()

    validate_password(new_password)

    user.password_hash = hash_password(new_password)
    user.reset_token = None
    user.reset_token_expires_at = None
    db.add(user)
    db.commit()
    logger.info("password_reset_completed", user_id=user.id)
    return user
