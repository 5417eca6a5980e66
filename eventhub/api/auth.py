from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from eventhub.api.schemas.events import MessageOut, SchemaBase
from eventhub.auth.deps import CurrentUser, DBSession
from eventhub.models.user import UserRole
from eventhub.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterIn(BaseModel):
    email: str | None = None
    password: str | None = None
    role: str | None = None


class UserOut(SchemaBase):
    id: int
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserEnvelope(SchemaBase):
    user: UserOut


class LoginIn(BaseModel):
    email: str
    password: str


class TokenOut(BaseModel):
    token: str


@router.post("/register", response_model=UserEnvelope, status_code=201)
def register(payload: RegisterIn, db: DBSession):
    user = auth_service.register_user(db, payload.email, payload.password, payload.role)
    return UserEnvelope(user=UserOut.model_validate(user))


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: DBSession):
    return TokenOut(token=auth_service.login(db, payload.email, payload.password))


@router.post("/logout", response_model=MessageOut)
def logout():
    # Tokens are not tracked server side; they stay valid until they expire.
    return MessageOut(message="Logout successful")


@router.delete("/users/{user_id}", response_model=MessageOut)
def delete_user(user_id: int, user: CurrentUser, db: DBSession):
    auth_service.delete_account(db, user, user_id)
    return MessageOut(message="User deleted successfully")
