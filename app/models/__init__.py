"""Database models."""

from app.models.booking import Booking, BookingMessage, BookingPayment
from app.models.property import Property
from app.models.user import User, UserRole

__all__ = [
    # User
    "User",
    "UserRole",
    # Property
    "Property",
    # Booking
    "Booking",
    "BookingPayment",
    "BookingMessage",
]
