"""Database models package."""
from database.models.profile import Profile, ProfileRole
from database.models.service import Service, ServiceCategory
from database.models.booking import Booking, BookingStatus
from database.models.payment import Payment, PaymentStatus
from database.models.setting import Setting

__all__ = [
    "Profile",
    "ProfileRole",
    "Service",
    "ServiceCategory",
    "Booking",
    "BookingStatus",
    "Payment",
    "PaymentStatus",
    "Setting",
]
