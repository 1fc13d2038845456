"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.booking_state import BookingStatus
from app.domain.payment_state import PaymentStatus
from app.schemas.message import MessageResponse
from app.schemas.payment import PaymentResponse


class BookingCreate(BaseModel):
    """Schema for a renter requesting a booking."""

    property_id: UUID
    start_date: date
    end_date: date
    special_requests: str | None = Field(None, max_length=500)


class BookingStatusUpdate(BaseModel):
    """Schema for moving a booking to a new status."""

    status: BookingStatus
    reason: str | None = Field(None, max_length=1000)  # required when cancelling


class BookingPriceBreakdown(BaseModel):
    """Schema for booking price breakdown."""

    monthly_rent: int
    months: int
    rent_total: int
    security_deposit: int
    total_amount: int


class BookingCalculateRequest(BaseModel):
    """Schema for pricing a booking without creating it."""

    property_id: UUID
    start_date: date
    end_date: date


class BookingCalculateResponse(BaseModel):
    """Schema for booking price calculation response."""

    available: bool
    price_breakdown: BookingPriceBreakdown | None = None
    unavailable_reason: str | None = None


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_number: str
    property_id: UUID
    renter_id: UUID
    owner_id: UUID

    # Dates
    start_date: date
    end_date: date
    duration_months: int
    move_in_date: date | None
    move_out_date: date | None

    # Pricing
    monthly_rent: int
    security_deposit: int
    total_amount: int
    amount_paid: int
    balance_due: int

    # Status
    status: BookingStatus
    payment_status: PaymentStatus

    special_requests: str | None

    # Cancellation
    cancelled_by: UUID | None
    cancellation_reason: str | None
    cancelled_at: datetime | None

    # Timestamps
    approved_at: datetime | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class BookingDetailResponse(BookingResponse):
    """Schema for a booking with its payment history and communication log."""

    payments: list[PaymentResponse] = []
    messages: list[MessageResponse] = []


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
