"""Payment status derivation for a booking's ledger."""

from datetime import date, datetime, timedelta
from enum import Enum

from app.core.exceptions import InvalidPayment, LedgerInvariantError
from app.domain.booking_state import BLOCKING_STATUSES


class PaymentStatus(str, Enum):
    """Aggregate payment state of a booking."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"


class PaymentMethod(str, Enum):
    """Accepted payment methods."""

    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CASH = "cash"


_LEVEL = {
    PaymentStatus.PENDING: 0,
    PaymentStatus.PARTIAL: 1,
    PaymentStatus.PAID: 2,
}


def assert_positive_amount(amount: int) -> None:
    if amount <= 0:
        raise InvalidPayment(f"Payment amount must be positive, got {amount}")


def derive_payment_status(paid: int, total_amount: int) -> PaymentStatus:
    """Status implied purely by cumulative payments against the total."""
    if paid >= total_amount:
        return PaymentStatus.PAID
    if paid > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def assert_ledger_consistent(stored: PaymentStatus, paid: int, total_amount: int) -> None:
    """Guard: the stored status must match what the history implies.

    ``overdue`` is a marker layered over ``pending``/``partial`` and is
    consistent with either.
    """
    derived = derive_payment_status(paid, total_amount)
    if stored is PaymentStatus.OVERDUE:
        if derived is PaymentStatus.PAID:
            raise LedgerInvariantError(
                f"Booking marked overdue but fully paid ({paid}/{total_amount})"
            )
        return
    if stored is not derived:
        raise LedgerInvariantError(
            f"Stored payment status {stored.value} does not match ledger "
            f"({paid}/{total_amount} implies {derived.value})"
        )


def next_payment_status(previous: PaymentStatus, paid: int, total_amount: int) -> PaymentStatus:
    """Status after an append; never lower than before the append."""
    derived = derive_payment_status(paid, total_amount)
    if previous is PaymentStatus.OVERDUE:
        return PaymentStatus.OVERDUE if derived is PaymentStatus.PENDING else derived
    return derived if _LEVEL[derived] >= _LEVEL[previous] else previous


def payment_due_date(start_date: date, grace_days: int) -> date:
    return start_date + timedelta(days=grace_days)


def is_past_due(booking, now: datetime, grace_days: int) -> bool:
    """An approved/active booking still owing money after its due date."""
    return (
        booking.status in BLOCKING_STATUSES
        and booking.payment_status in (PaymentStatus.PENDING, PaymentStatus.PARTIAL)
        and now.date() > payment_due_date(booking.start_date, grace_days)
    )


def mark_overdue_if_past_due(booking, now: datetime, grace_days: int) -> bool:
    """Flag the booking as overdue when it is past due.

    Returns True when the booking was changed.
    """
    if not is_past_due(booking, now, grace_days):
        return False
    booking.payment_status = PaymentStatus.OVERDUE
    return True
