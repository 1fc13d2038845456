from datetime import date
from types import SimpleNamespace
from uuid import uuid4

import pytest

from app.domain.booking_state import BookingStatus
from app.domain.conflicts import find_conflict, has_conflict, ranges_overlap

PROPERTY_ID = uuid4()


def make_booking(start: date, end: date, status: BookingStatus = BookingStatus.APPROVED, property_id=PROPERTY_ID):
    return SimpleNamespace(
        id=uuid4(),
        property_id=property_id,
        status=status,
        start_date=start,
        end_date=end,
    )


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ((date(2025, 1, 1), date(2025, 2, 1)), (date(2025, 1, 15), date(2025, 3, 1)), True),
        ((date(2025, 1, 1), date(2025, 2, 1)), (date(2025, 1, 5), date(2025, 1, 10)), True),
        ((date(2025, 1, 1), date(2025, 2, 1)), (date(2025, 2, 1), date(2025, 3, 1)), False),
        ((date(2025, 2, 1), date(2025, 3, 1)), (date(2025, 1, 1), date(2025, 2, 1)), False),
        ((date(2025, 1, 1), date(2025, 1, 2)), (date(2025, 6, 1), date(2025, 7, 1)), False),
    ],
)
def test_ranges_overlap_is_half_open(a, b, expected):
    assert ranges_overlap(*a, *b) is expected
    assert ranges_overlap(*b, *a) is expected


def test_approved_and_active_bookings_block():
    for status in (BookingStatus.APPROVED, BookingStatus.ACTIVE):
        existing = make_booking(date(2025, 1, 1), date(2025, 3, 1), status=status)
        assert has_conflict([existing], PROPERTY_ID, date(2025, 2, 1), date(2025, 4, 1))


@pytest.mark.parametrize(
    "status",
    [
        BookingStatus.PENDING,
        BookingStatus.REJECTED,
        BookingStatus.CANCELLED,
        BookingStatus.COMPLETED,
    ],
)
def test_non_blocking_statuses_never_conflict(status):
    existing = make_booking(date(2025, 1, 1), date(2025, 3, 1), status=status)
    assert not has_conflict([existing], PROPERTY_ID, date(2025, 1, 1), date(2025, 3, 1))


def test_adjacent_ranges_do_not_conflict():
    existing = make_booking(date(2025, 1, 1), date(2025, 3, 1))

    assert not has_conflict([existing], PROPERTY_ID, date(2024, 12, 1), date(2025, 1, 1))
    assert not has_conflict([existing], PROPERTY_ID, date(2025, 3, 1), date(2025, 4, 1))


def test_other_properties_are_ignored():
    existing = make_booking(date(2025, 1, 1), date(2025, 3, 1), property_id=uuid4())
    assert not has_conflict([existing], PROPERTY_ID, date(2025, 1, 1), date(2025, 3, 1))


def test_exclude_booking_id_allows_self_check():
    existing = make_booking(date(2025, 1, 1), date(2025, 3, 1))

    assert find_conflict([existing], PROPERTY_ID, date(2025, 1, 1), date(2025, 3, 1)) is existing
    assert not has_conflict(
        [existing],
        PROPERTY_ID,
        date(2025, 1, 1),
        date(2025, 3, 1),
        exclude_booking_id=existing.id,
    )
