"""Booking-related database models."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base
from app.domain.booking_state import BookingStatus
from app.domain.payment_state import PaymentMethod, PaymentStatus
from app.domain.pricing import months_between


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _enum_column(enum_cls: type) -> SAEnum:
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda e: [m.value for m in e],
    )


class Booking(Base):
    """A renter's claim on a property for a date range."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_bookings_date_order"),
        CheckConstraint("monthly_rent >= 0", name="ck_bookings_rent_non_negative"),
        CheckConstraint("security_deposit >= 0", name="ck_bookings_deposit_non_negative"),
        CheckConstraint("total_amount >= 0", name="ck_bookings_total_non_negative"),
        Index("ix_bookings_property_dates", "property_id", "start_date", "end_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_number: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False, index=True
    )  # RENT-XXXXXX
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("properties.id"), nullable=False, index=True
    )
    renter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )

    # Dates
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    move_in_date: Mapped[date | None] = mapped_column(Date)
    move_out_date: Mapped[date | None] = mapped_column(Date)

    # Pricing (in cents); total_amount is derived, see app.domain.pricing
    monthly_rent: Mapped[int] = mapped_column(Integer, nullable=False)
    security_deposit: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False)

    # Status
    status: Mapped[BookingStatus] = mapped_column(
        _enum_column(BookingStatus), nullable=False, default=BookingStatus.PENDING, index=True
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        _enum_column(PaymentStatus), nullable=False, default=PaymentStatus.PENDING
    )

    special_requests: Mapped[str | None] = mapped_column(String(500))

    # Cancellation
    cancelled_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"))
    cancellation_reason: Mapped[str | None] = mapped_column(Text)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Timestamps
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships (eager so they stay usable outside the async load)
    payments: Mapped[list["BookingPayment"]] = relationship(
        "BookingPayment",
        back_populates="booking",
        order_by="BookingPayment.sequence",
        lazy="selectin",
    )
    messages: Mapped[list["BookingMessage"]] = relationship(
        "BookingMessage",
        back_populates="booking",
        order_by="BookingMessage.created_at",
        lazy="selectin",
    )

    @property
    def duration_months(self) -> int:
        """Billing months covered by the booking."""
        return months_between(self.start_date, self.end_date)

    @property
    def amount_paid(self) -> int:
        return sum(p.amount for p in self.payments)

    @property
    def balance_due(self) -> int:
        return max(0, self.total_amount - self.amount_paid)


class BookingPayment(Base):
    """Append-only payment entry against a booking."""

    __tablename__ = "booking_payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_booking_payments_amount_positive"),
        UniqueConstraint("booking_id", "sequence", name="uq_booking_payments_sequence"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id"), nullable=False, index=True
    )
    recorded_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-based position in the ledger

    amount: Mapped[int] = mapped_column(Integer, nullable=False)  # in cents
    payment_method: Mapped[PaymentMethod] = mapped_column(
        _enum_column(PaymentMethod), nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text)
    transaction_id: Mapped[str | None] = mapped_column(String(100))  # external reference

    paid_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    booking: Mapped["Booking"] = relationship("Booking", back_populates="payments")


class BookingMessage(Base):
    """Message exchanged between renter and owner about a booking."""

    __tablename__ = "booking_messages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id"), nullable=False, index=True
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    booking: Mapped["Booking"] = relationship("Booking", back_populates="messages")
