"""Payment-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.payment_state import PaymentMethod, PaymentStatus


class PaymentCreate(BaseModel):
    """Schema for recording a payment against a booking.

    The amount is validated by the ledger, not here, so that a non-positive
    amount is reported as an invalid payment.
    """

    amount: int  # in cents
    payment_method: PaymentMethod
    description: str | None = Field(None, max_length=500)
    transaction_id: str | None = Field(None, max_length=100)


class PaymentResponse(BaseModel):
    """Schema for a single ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    recorded_by: UUID
    sequence: int
    amount: int
    payment_method: PaymentMethod
    description: str | None
    transaction_id: str | None
    paid_at: datetime


class PaymentStatusResponse(BaseModel):
    """Schema returned after a payment is recorded."""

    booking_id: UUID
    payment_status: PaymentStatus
    total_amount: int
    amount_paid: int
    balance_due: int
    payment: PaymentResponse


class PaymentHistoryResponse(BaseModel):
    """Schema for a booking's payment history."""

    booking_id: UUID
    payment_status: PaymentStatus
    total_amount: int
    amount_paid: int
    balance_due: int
    payments: list[PaymentResponse]
