"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingCalculateRequest,
    BookingCalculateResponse,
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from app.schemas.message import MessageCreate, MessageResponse
from app.schemas.payment import PaymentCreate, PaymentResponse, PaymentStatusResponse
from app.schemas.property import PropertyCreate, PropertyResponse

__all__ = [
    # Property
    "PropertyCreate",
    "PropertyResponse",
    # Booking
    "BookingCreate",
    "BookingStatusUpdate",
    "BookingResponse",
    "BookingDetailResponse",
    "BookingListResponse",
    "BookingCalculateRequest",
    "BookingCalculateResponse",
    # Payment
    "PaymentCreate",
    "PaymentResponse",
    "PaymentStatusResponse",
    # Message
    "MessageCreate",
    "MessageResponse",
]
