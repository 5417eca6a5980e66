from __future__ import annotations

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.api.schemas.events import CouponCreate
from eventhub.auth.policy import authorize
from eventhub.models import Coupon, User
from eventhub.services.exceptions import DuplicateError, ValidationError

logger = structlog.get_logger()


def create_coupon(db: Session, admin: User, payload: CouponCreate) -> Coupon:
    authorize(admin, "coupon", "create")

    if payload.discount <= 0:
        raise ValidationError("Discount must be greater than 0")

    coupon = Coupon(
        code=payload.code.strip(),
        discount=payload.discount,
        valid_until=payload.valid_until,
        created_by_id=admin.id,
    )
    db.add(coupon)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError("Coupon code already exists") from None

    db.refresh(coupon)
    logger.info("coupon_created", coupon_id=coupon.id, by=admin.id)
    return coupon
