from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SchemaBase(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class EventCreate(SchemaBase):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    date: datetime
    location: str = Field(min_length=1, max_length=300)
    category: str | None = Field(default=None, max_length=100)


class EventUpdate(SchemaBase):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    date: datetime | None = None
    location: str | None = Field(default=None, min_length=1, max_length=300)
    category: str | None = Field(default=None, max_length=100)

    @field_validator("title", "date", "location")
    @classmethod
    def _not_null(cls, value):
        # Present-but-null would violate NOT NULL columns.
        if value is None:
            raise ValueError("must not be null")
        return value


class EventOut(SchemaBase):
    id: int
    title: str
    description: str | None = None
    date: datetime
    location: str
    category: str | None = None
    organizer_id: int
    created_at: datetime
    updated_at: datetime


class EventEnvelope(SchemaBase):
    event: EventOut


class EventUpdatedOut(SchemaBase):
    message: str = "Event updated successfully"
    event: EventOut


class RegistrationOut(SchemaBase):
    id: int
    user_id: int
    event_id: int
    created_at: datetime


class RegistrationEnvelope(SchemaBase):
    registration: RegistrationOut


class RegistrationWithEventOut(RegistrationOut):
    event: EventOut


class HistoryOut(SchemaBase):
    registrations: list[RegistrationWithEventOut]


class FeedbackIn(SchemaBase):
    feedback: str


class FeedbackOut(SchemaBase):
    user_id: int
    event_id: int
    feedback: str
    created_at: datetime
    updated_at: datetime


class FeedbackEnvelope(SchemaBase):
    feedback: FeedbackOut


class CouponCreate(SchemaBase):
    code: str = Field(min_length=1, max_length=64)
    discount: float
    valid_until: datetime


class CouponOut(SchemaBase):
    id: int
    code: str
    discount: float
    valid_until: datetime
    created_by_id: int
    created_at: datetime


class CouponEnvelope(SchemaBase):
    coupon: CouponOut


class MessageOut(SchemaBase):
    message: str
