from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from eventhub.auth.jwt import verify_access_token
from eventhub.auth.policy import authorize
from eventhub.db import get_db
from eventhub.models import User
from eventhub.services.exceptions import AuthError, NotFoundError

DBSession = Annotated[Session, Depends(get_db)]


def get_current_user(request: Request, db: DBSession) -> User:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise AuthError("You are not logged in. Please log in to get access.")

    token = auth.removeprefix("Bearer ").strip()
    user_id = verify_access_token(token)

    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("No user found with this id")

    request.state.user = user
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require(resource: str, action: str):
    """Role gate for ``(resource, action)``, resolved before body and path validation."""

    def _dependency(user: CurrentUser) -> User:
        authorize(user, resource, action)
        return user

    return _dependency
