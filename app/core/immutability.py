"""Append-only enforcement for payment history using SQLAlchemy events."""

import logging
from datetime import UTC, datetime

from sqlalchemy import event

from app.core.exceptions import LedgerInvariantError

logger = logging.getLogger(__name__)


class ImmutabilityViolationError(LedgerInvariantError):
    """Raised when attempting to modify an immutable ledger record."""

    def __init__(self, model_name: str, operation: str, record_id: str):
        self.model_name = model_name
        self.operation = operation
        self.record_id = record_id
        super().__init__(
            f"Immutability violation: Cannot {operation} {model_name} record {record_id}. "
            "Payment entries are immutable after creation."
        )


def _log_immutability_violation(model_name: str, operation: str, record_id: str) -> None:
    """Log immutability violation for audit purposes."""
    logger.error(
        f"IMMUTABILITY_VIOLATION: Attempted to {operation} {model_name} "
        f"record_id={record_id} at {datetime.now(UTC).isoformat()}"
    )


_registered = False


def register_immutability_enforcement() -> None:
    """Register SQLAlchemy event listeners for append-only payment entries.

    Safe to call more than once.
    """
    global _registered
    if _registered:
        return

    from app.models.booking import BookingPayment

    @event.listens_for(BookingPayment, "before_update")
    def prevent_payment_update(mapper, connection, target):
        """Prevent updates to BookingPayment (append-only)."""
        _log_immutability_violation("BookingPayment", "UPDATE", str(target.id))
        raise ImmutabilityViolationError("BookingPayment", "UPDATE", str(target.id))

    @event.listens_for(BookingPayment, "before_delete")
    def prevent_payment_delete(mapper, connection, target):
        """Prevent deletion of BookingPayment (append-only)."""
        _log_immutability_violation("BookingPayment", "DELETE", str(target.id))
        raise ImmutabilityViolationError("BookingPayment", "DELETE", str(target.id))

    _registered = True
    logger.info("Immutability enforcement registered for payment entries")
