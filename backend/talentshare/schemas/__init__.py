from talentshare.schemas.common import Envelope, ListEnvelope, MessageResponse, ErrorResponse
from talentshare.schemas.user import (
    UserCreate, UserLogin, UserResponse, AuthResponse, PasswordChange, ProfileUpdate,
)
from talentshare.schemas.slot import SlotCreate, SlotResponse
from talentshare.schemas.talent import TalentCreate, TalentUpdate, TalentResponse, TalentDetailResponse
from talentshare.schemas.booking import (
    BookingCreate, BookingStatusUpdate, BookingResponse, BookingDetailResponse,
)
from talentshare.schemas.notification import (
    NotificationResponse, NotificationListResponse, UnreadCountResponse,
)
from talentshare.schemas.review import (
    ReviewCreate, ReviewUpdate, ReviewResponse, ReviewListResponse, CanReviewResponse,
)

__all__ = [
    "Envelope", "ListEnvelope", "MessageResponse", "ErrorResponse",
    "UserCreate", "UserLogin", "UserResponse", "AuthResponse", "PasswordChange", "ProfileUpdate",
    "SlotCreate", "SlotResponse",
    "TalentCreate", "TalentUpdate", "TalentResponse", "TalentDetailResponse",
    "BookingCreate", "BookingStatusUpdate", "BookingResponse", "BookingDetailResponse",
    "NotificationResponse", "NotificationListResponse", "UnreadCountResponse",
    "ReviewCreate", "ReviewUpdate", "ReviewResponse", "ReviewListResponse", "CanReviewResponse",
]
