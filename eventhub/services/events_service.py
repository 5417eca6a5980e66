from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from eventhub.api.schemas.events import EventCreate, EventUpdate
from eventhub.auth.policy import authorize
from eventhub.core.config import settings
from eventhub.models import Event, Feedback, Registration, User
from eventhub.services.exceptions import NotFoundError, ValidationError

logger = structlog.get_logger()

FILTERABLE_FIELDS = ("category", "location")

SORTABLE_COLUMNS = {
    "id": Event.id,
    "title": Event.title,
    "date": Event.date,
    "location": Event.location,
    "category": Event.category,
    "createdAt": Event.created_at,
    "created_at": Event.created_at,
    "updatedAt": Event.updated_at,
    "updated_at": Event.updated_at,
}


def _get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def create_event(db: Session, organizer: User, payload: EventCreate) -> Event:
    authorize(organizer, "event", "create")

    event = Event(**payload.model_dump(), organizer_id=organizer.id)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("event_created", event_id=event.id, organizer_id=organizer.id)
    return event


def update_event(db: Session, requester: User, event_id: int, patch: EventUpdate) -> Event:
    authorize(requester, "event", "update")
    event = _get_event(db, event_id)
    authorize(requester, "event", "update", event)

    for key, value in patch.model_dump(exclude_unset=True).items():
        setattr(event, key, value)

    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("event_updated", event_id=event.id, by=requester.id)
    return event


def delete_event(db: Session, requester: User, event_id: int) -> None:
    authorize(requester, "event", "delete")
    event = _get_event(db, event_id)
    authorize(requester, "event", "delete", event)

    # Dependents and the event go in one transaction.
    db.execute(delete(Registration).where(Registration.event_id == event.id))
    db.execute(delete(Feedback).where(Feedback.event_id == event.id))
    db.delete(event)
    db.commit()
    logger.info("event_deleted", event_id=event_id, by=requester.id)


def list_events(
    db: Session,
    filters: dict[str, Any] | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> list[Event]:
    stmt = select(Event)

    for name in FILTERABLE_FIELDS:
        value = (filters or {}).get(name)
        if value:
            stmt = stmt.where(getattr(Event, name) == str(value))

    if sort_by:
        column = SORTABLE_COLUMNS.get(sort_by)
        if column is None:
            raise ValidationError("Invalid sort field")
        descending = (sort_order or "").lower() == "desc"
        stmt = stmt.order_by(column.desc() if descending else column.asc(), Event.id.asc())
    else:
        stmt = stmt.order_by(Event.id.asc())

    return list(db.scalars(stmt).all())


def parse_page_number(raw: Any) -> int:
    text = str(raw).strip()
    # int() alone would accept "+2", "1_0" and non-ASCII digits.
    if not (text.isascii() and text.isdigit()):
        raise ValidationError("Invalid page number")
    page = int(text)
    if page < 1:
        raise ValidationError("Invalid page number")
    return page


def list_events_page(db: Session, page_number: Any) -> list[Event]:
    page = parse_page_number(page_number)
    page_size = settings.events_page_size

    stmt = (
        select(Event)
        .order_by(Event.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(db.scalars(stmt).all())
