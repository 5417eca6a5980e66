from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from eventhub.api.schemas.events import (
    CouponCreate,
    CouponEnvelope,
    CouponOut,
    EventCreate,
    EventEnvelope,
    EventOut,
    EventUpdate,
    EventUpdatedOut,
    FeedbackEnvelope,
    FeedbackIn,
    FeedbackOut,
    HistoryOut,
    MessageOut,
    RegistrationEnvelope,
    RegistrationOut,
    RegistrationWithEventOut,
)
from eventhub.auth.deps import CurrentUser, DBSession, require
from eventhub.models import User
from eventhub.services import coupons_service, events_service, registration_service

router = APIRouter(prefix="/events", tags=["events"])

EventCreator = Annotated[User, Depends(require("event", "create"))]
EventEditor = Annotated[User, Depends(require("event", "update"))]
EventRemover = Annotated[User, Depends(require("event", "delete"))]
HistoryViewer = Annotated[User, Depends(require("registration", "history"))]
CouponIssuer = Annotated[User, Depends(require("coupon", "create"))]


@router.post("", response_model=EventEnvelope, status_code=201)
def create_event(payload: EventCreate, user: EventCreator, db: DBSession):
    event = events_service.create_event(db, user, payload)
    return EventEnvelope(event=EventOut.model_validate(event))


@router.get("", response_model=list[EventOut])
def list_events(
    user: CurrentUser,
    db: DBSession,
    category: str | None = None,
    location: str | None = None,
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_order: str | None = Query(default=None, alias="sortOrder"),
):
    events = events_service.list_events(
        db,
        filters={"category": category, "location": location},
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return [EventOut.model_validate(e) for e in events]


@router.get("/page/{page_number}", response_model=list[EventOut])
def list_events_page(page_number: str, user: CurrentUser, db: DBSession):
    events = events_service.list_events_page(db, page_number)
    return [EventOut.model_validate(e) for e in events]


@router.get("/history", response_model=HistoryOut)
def registration_history(user: HistoryViewer, db: DBSession):
    registrations = registration_service.history(db, user)
    return HistoryOut(
        registrations=[RegistrationWithEventOut.model_validate(r) for r in registrations]
    )


@router.post("/coupons", response_model=CouponEnvelope, status_code=201)
def create_coupon(payload: CouponCreate, user: CouponIssuer, db: DBSession):
    coupon = coupons_service.create_coupon(db, user, payload)
    return CouponEnvelope(coupon=CouponOut.model_validate(coupon))


@router.delete("/delete/{event_id}", response_model=MessageOut)
def unregister(event_id: int, user: CurrentUser, db: DBSession):
    registration_service.unregister(db, user, event_id)
    return MessageOut(message="Registration deleted successfully")


@router.put("/{event_id}", response_model=EventUpdatedOut)
def update_event(event_id: int, payload: EventUpdate, user: EventEditor, db: DBSession):
    event = events_service.update_event(db, user, event_id, payload)
    return EventUpdatedOut(event=EventOut.model_validate(event))


@router.delete("/{event_id}", response_model=MessageOut)
def delete_event(event_id: int, user: EventRemover, db: DBSession):
    events_service.delete_event(db, user, event_id)
    return MessageOut(message="Event deleted successfully")


@router.post("/{event_id}/register", response_model=RegistrationEnvelope, status_code=201)
def register_for_event(event_id: int, user: CurrentUser, db: DBSession):
    registration = registration_service.register(db, user, event_id)
    return RegistrationEnvelope(registration=RegistrationOut.model_validate(registration))


@router.post("/{event_id}/feedback", response_model=FeedbackEnvelope, status_code=201)
def submit_feedback(
    event_id: int,
    payload: FeedbackIn,
    user: CurrentUser,
    db: DBSession,
    response: Response,
):
    feedback, created = registration_service.submit_feedback(db, user, event_id, payload.feedback)
    if not created:
        response.status_code = 200
    return FeedbackEnvelope(feedback=FeedbackOut.model_validate(feedback))
