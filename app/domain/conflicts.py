"""Date-range conflict rules for bookings on the same property."""

from collections.abc import Iterable
from datetime import date
from typing import Protocol
from uuid import UUID

from app.domain.booking_state import BLOCKING_STATUSES, BookingStatus


class DatedBooking(Protocol):
    id: UUID
    property_id: UUID
    status: BookingStatus
    start_date: date
    end_date: date


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Half-open overlap test: touching endpoints do not overlap."""
    return start_a < end_b and start_b < end_a


def find_conflict(
    bookings: Iterable[DatedBooking],
    property_id: UUID,
    start: date,
    end: date,
    exclude_booking_id: UUID | None = None,
) -> DatedBooking | None:
    """Return the first approved/active booking overlapping [start, end), if any."""
    for booking in bookings:
        if booking.property_id != property_id:
            continue
        if exclude_booking_id is not None and booking.id == exclude_booking_id:
            continue
        if booking.status not in BLOCKING_STATUSES:
            continue
        if ranges_overlap(booking.start_date, booking.end_date, start, end):
            return booking
    return None


def has_conflict(
    bookings: Iterable[DatedBooking],
    property_id: UUID,
    start: date,
    end: date,
    exclude_booking_id: UUID | None = None,
) -> bool:
    return find_conflict(bookings, property_id, start, end, exclude_booking_id) is not None
