from talentshare.models.user import User
from talentshare.models.talent import Talent, TalentCategory
from talentshare.models.slot import Slot
from talentshare.models.booking import Booking, BookingStatus
from talentshare.models.notification import Notification, NotificationType
from talentshare.models.review import Review

__all__ = [
    "User",
    "Talent", "TalentCategory",
    "Slot",
    "Booking", "BookingStatus",
    "Notification", "NotificationType",
    "Review",
]
