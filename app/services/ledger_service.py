"""Payment ledger for bookings.

The ledger is append-only: entries are never edited or removed, and the
booking's payment status is recomputed in the same flush as each append.
Refunds and corrections are handled outside this service.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import InvalidPayment
from app.domain.booking_state import BookingStatus
from app.domain.payment_state import (
    PaymentStatus,
    assert_ledger_consistent,
    assert_positive_amount,
    is_past_due,
    mark_overdue_if_past_due,
    next_payment_status,
)
from app.models.booking import Booking, BookingPayment
from app.schemas.payment import PaymentCreate

logger = logging.getLogger(__name__)

_CLOSED_FOR_PAYMENT = (BookingStatus.REJECTED, BookingStatus.CANCELLED)


def assert_no_duplicate_transaction(booking: Booking, transaction_id: str | None) -> None:
    """Guard: the same external transaction may only be recorded once per booking."""
    if not transaction_id:
        return
    if any(p.transaction_id == transaction_id for p in booking.payments):
        raise InvalidPayment(
            f"Transaction {transaction_id} already recorded for booking {booking.booking_number}"
        )


class LedgerService:
    """Append payments and keep payment status in step with them."""

    def __init__(self, db: AsyncSession, grace_days: int | None = None) -> None:
        self.db = db
        self.grace_days = settings.payment_grace_days if grace_days is None else grace_days

    async def append_payment(
        self,
        booking: Booking,
        entry: PaymentCreate,
        recorded_by: UUID,
        now: datetime | None = None,
    ) -> PaymentStatus:
        """Record a payment and return the booking's new payment status."""
        assert_positive_amount(entry.amount)
        if booking.status in _CLOSED_FOR_PAYMENT:
            raise InvalidPayment(f"Cannot record payments on a {booking.status.value} booking")
        assert_no_duplicate_transaction(booking, entry.transaction_id)

        paid_before = booking.amount_paid
        assert_ledger_consistent(booking.payment_status, paid_before, booking.total_amount)

        now = now or datetime.now(UTC)
        booking.payments.append(
            BookingPayment(
                booking_id=booking.id,
                recorded_by=recorded_by,
                sequence=len(booking.payments) + 1,
                amount=entry.amount,
                payment_method=entry.payment_method,
                description=entry.description,
                transaction_id=entry.transaction_id,
                paid_at=now,
            )
        )
        previous = booking.payment_status
        booking.payment_status = next_payment_status(
            previous, paid_before + entry.amount, booking.total_amount
        )
        self.mark_overdue_if_past_due(booking, now)
        await self.db.flush()

        logger.info(
            f"Payment of {entry.amount} recorded on booking {booking.booking_number}: "
            f"{previous.value} -> {booking.payment_status.value} "
            f"({paid_before + entry.amount}/{booking.total_amount})"
        )
        return booking.payment_status

    def is_past_due(self, booking: Booking, now: datetime) -> bool:
        return is_past_due(booking, now, self.grace_days)

    def mark_overdue_if_past_due(self, booking: Booking, now: datetime) -> bool:
        """Apply the overdue policy to a booking; True if it changed."""
        changed = mark_overdue_if_past_due(booking, now, self.grace_days)
        if changed:
            logger.warning(
                f"Booking {booking.booking_number} is overdue "
                f"({booking.amount_paid}/{booking.total_amount} paid)"
            )
        return changed
