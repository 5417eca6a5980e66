from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from eventhub.models.base import Base, CreatedAtMixin, IntegerPrimaryKeyMixin


class Coupon(Base, IntegerPrimaryKeyMixin, CreatedAtMixin):
    __tablename__ = "coupons"

    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    discount: Mapped[float] = mapped_column(Float, nullable=False)
    valid_until: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    created_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
