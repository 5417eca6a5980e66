from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from eventhub.models.base import Base, TimestampMixin


class Feedback(Base, TimestampMixin):
    """One row per (user, event); resubmission overwrites ``feedback``."""

    __tablename__ = "feedback"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True
    )
    feedback: Mapped[str] = mapped_column(Text, nullable=False)
