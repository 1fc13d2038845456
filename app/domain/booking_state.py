"""Booking state machine."""

from enum import Enum

from app.core.exceptions import IllegalTransition, MissingCancellationReason, Unauthorized


class BookingStatus(str, Enum):
    """Booking lifecycle states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ActorRole(str, Enum):
    """Who is driving a transition."""

    OWNER = "owner"
    RENTER = "renter"
    SYSTEM = "system"


_OWNER = frozenset({ActorRole.OWNER})
_OWNER_OR_SYSTEM = frozenset({ActorRole.OWNER, ActorRole.SYSTEM})
_PARTIES = frozenset({ActorRole.OWNER, ActorRole.RENTER})

# target status -> roles allowed to request it, per current status
BOOKING_TRANSITIONS: dict[BookingStatus, dict[BookingStatus, frozenset[ActorRole]]] = {
    BookingStatus.PENDING: {
        BookingStatus.APPROVED: _OWNER,
        BookingStatus.REJECTED: _OWNER,
    },
    BookingStatus.APPROVED: {
        BookingStatus.ACTIVE: _OWNER_OR_SYSTEM,
        BookingStatus.CANCELLED: _PARTIES,
    },
    BookingStatus.ACTIVE: {
        BookingStatus.COMPLETED: _OWNER_OR_SYSTEM,
        BookingStatus.CANCELLED: _PARTIES,
    },
    BookingStatus.REJECTED: {},
    BookingStatus.COMPLETED: {},
    BookingStatus.CANCELLED: {},
}

# Statuses that hold the property's calendar
BLOCKING_STATUSES = frozenset({BookingStatus.APPROVED, BookingStatus.ACTIVE})


def assert_booking_transition(
    current: BookingStatus,
    target: BookingStatus,
    actor: ActorRole,
    reason: str | None = None,
) -> None:
    """Raise unless ``actor`` may move a booking from ``current`` to ``target``."""
    allowed = BOOKING_TRANSITIONS[current]
    if target not in allowed:
        raise IllegalTransition(current.value, target.value)
    if actor not in allowed[target]:
        raise Unauthorized(
            f"A {actor.value} cannot move a booking from {current.value} to {target.value}"
        )
    if target is BookingStatus.CANCELLED and not (reason and reason.strip()):
        raise MissingCancellationReason()


def availability_after(current: BookingStatus, target: BookingStatus) -> bool | None:
    """Property availability implied by a transition, or None to leave it alone.

    Completion deliberately leaves the property closed; reopening it is an
    explicit owner action.
    """
    if target is BookingStatus.APPROVED:
        return False
    if current is BookingStatus.APPROVED and target in (
        BookingStatus.CANCELLED,
        BookingStatus.REJECTED,
    ):
        return True
    return None
