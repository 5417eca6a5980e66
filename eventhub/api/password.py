from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from eventhub.api.schemas.events import MessageOut
from eventhub.auth.deps import DBSession
from eventhub.mail import Mailer, get_mailer
from eventhub.services import password_reset_service

router = APIRouter(prefix="/password", tags=["password"])

MailerDep = Annotated[Mailer, Depends(get_mailer)]


class PasswordResetIn(BaseModel):
    email: str


class ResetPasswordIn(BaseModel):
    new_password: str | None = Field(default=None, alias="newPassword")

    model_config = {"populate_by_name": True}


@router.post("/password-reset", response_model=MessageOut)
def request_password_reset(payload: PasswordResetIn, db: DBSession, mailer: MailerDep):
    password_reset_service.request_reset(db, mailer, payload.email)
    return MessageOut(message="Password reset email sent")


@router.post("/reset-password/{reset_token}", response_model=MessageOut)
def reset_password(reset_token: str, payload: ResetPasswordIn, db: DBSession):
    password_reset_service.consume_reset(db, reset_token, payload.new_password)
    return MessageOut(message="Password reset successful")
