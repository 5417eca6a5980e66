from __future__ import annotations

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.auth.policy import authorize
from eventhub.models import Event, Feedback, Registration, User
from eventhub.services.exceptions import (
    DuplicateError,
    NotFoundError,
    NotRegisteredError,
    ValidationError,
)

logger = structlog.get_logger()

ALREADY_REGISTERED = "You are already registered for this event"


def _find_registration(db: Session, user_id: int, event_id: int) -> Registration | None:
    return db.scalar(
        select(Registration).where(
            Registration.user_id == user_id,
            Registration.event_id == event_id,
        )
    )


def register(db: Session, user: User, event_id: int) -> Registration:
    if not db.get(Event, event_id):
        raise NotFoundError("Event not found")

    if _find_registration(db, user.id, event_id):
        raise DuplicateError(ALREADY_REGISTERED)

    registration = Registration(user_id=user.id, event_id=event_id)
    db.add(registration)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration for the same pair.
        db.rollback()
        raise DuplicateError(ALREADY_REGISTERED) from None

    db.refresh(registration)
    logger.info("event_registered", event_id=event_id, user_id=user.id)
    return registration


def unregister(db: Session, user: User, event_id: int) -> None:
    result = db.execute(
        delete(Registration).where(
            Registration.user_id == user.id,
            Registration.event_id == event_id,
        )
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotRegisteredError()

    db.commit()
    logger.info("event_unregistered", event_id=event_id, user_id=user.id)


def history(db: Session, user: User) -> list[Registration]:
    authorize(user, "registration", "history")
    stmt = (
        select(Registration)
        .where(Registration.user_id == user.id)
        .order_by(Registration.created_at.desc(), Registration.id.desc())
    )
    return list(db.scalars(stmt).unique().all())


def submit_feedback(db: Session, user: User, event_id: int, text: str) -> tuple[Feedback, bool]:
    """Insert or overwrite the user's feedback. Returns ``(feedback, created)``."""
    if not _find_registration(db, user.id, event_id):
        raise NotRegisteredError()

    if not text or not text.strip():
        raise ValidationError("Feedback text is required")

    feedback = db.get(Feedback, (user.id, event_id))
    created = feedback is None
    if created:
        feedback = Feedback(user_id=user.id, event_id=event_id, feedback=text)
    else:
        feedback.feedback = text

    db.add(feedback)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent first submission won; overwrite it instead.
        db.rollback()
        feedback = db.get(Feedback, (user.id, event_id))
        if feedback is None:
            # The conflict was the event or user disappearing, not a duplicate.
            raise NotFoundError("Event not found") from None
        feedback.feedback = text
        created = False
        db.commit()

    db.refresh(feedback)
    logger.info("feedback_submitted", event_id=event_id, user_id=user.id, created=created)
    return feedback, created
