from __future__ import annotations

import re

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.auth.jwt import create_access_token
from eventhub.auth.password import hash_password, needs_rehash, verify_password
from eventhub.auth.policy import authorize
from eventhub.models import User
from eventhub.models.user import UserRole
from eventhub.services.exceptions import (
    AuthError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_password(password: str | None) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 8 characters long")
    return password


def _parse_role(role: str | None) -> UserRole:
    try:
        return UserRole(role)
    except ValueError:
        raise ValidationError(
            "Valid role is required (e.g. 'ADMIN', 'ORGANIZER', 'ATTENDEE')"
        ) from None


def register_user(db: Session, email: str | None, password: str | None, role: str | None) -> User:
    if not email or not EMAIL_RE.match(email.strip()):
        raise ValidationError("Valid email is required")
    validate_password(password)
    user_role = _parse_role(role)

    email = normalize_email(email)
    if db.scalar(select(User).where(User.email == email)):
        raise DuplicateError("Email already exists")

    user = User(email=email, password_hash=hash_password(password), role=user_role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError("Email already exists") from None

    db.refresh(user)
    logger.info("user_registered", user_id=user.id, role=user.role.value)
    return user


def login(db: Session, email: str, password: str) -> str:
    """Return a bearer token for valid credentials.

    Unknown email and wrong password fail the same way so callers cannot
    probe which addresses are registered.
    """
    user = db.scalar(select(User).where(User.email == normalize_email(email)))
    if not user or not verify_password(password, user.password_hash):
        logger.info("login_failed")
        raise AuthError("Incorrect email or password")

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        db.add(user)
        db.commit()

    logger.info("login_succeeded", user_id=user.id)
    return create_access_token(user.id)


def delete_account(db: Session, requester: User, target_user_id: int) -> None:
    authorize(requester, "user", "delete", target_user_id)

    result = db.execute(delete(User).where(User.id == target_user_id))
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("User not found")

    db.commit()
    logger.info("user_deleted", target_user_id=target_user_id, by=requester.id)
