from eventhub.models.base import Base
from eventhub.models.coupon import Coupon
from eventhub.models.event import Event
from eventhub.models.feedback import Feedback
from eventhub.models.registration import Registration
from eventhub.models.user import User

__all__ = ["Base", "User", "Event", "Registration", "Feedback", "Coupon"]
