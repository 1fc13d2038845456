import pytest

from app.core.exceptions import IllegalTransition, MissingCancellationReason, Unauthorized
from app.domain.booking_state import (
    BLOCKING_STATUSES,
    BOOKING_TRANSITIONS,
    ActorRole,
    BookingStatus,
    assert_booking_transition,
    availability_after,
)

S = BookingStatus
OWNER, RENTER, SYSTEM = ActorRole.OWNER, ActorRole.RENTER, ActorRole.SYSTEM


@pytest.mark.parametrize(
    "current,target,actor",
    [
        (S.PENDING, S.APPROVED, OWNER),
        (S.PENDING, S.REJECTED, OWNER),
        (S.APPROVED, S.ACTIVE, OWNER),
        (S.APPROVED, S.ACTIVE, SYSTEM),
        (S.APPROVED, S.CANCELLED, OWNER),
        (S.APPROVED, S.CANCELLED, RENTER),
        (S.ACTIVE, S.COMPLETED, OWNER),
        (S.ACTIVE, S.COMPLETED, SYSTEM),
        (S.ACTIVE, S.CANCELLED, RENTER),
    ],
)
def test_allowed_transitions(current, target, actor):
    assert_booking_transition(current, target, actor, reason="moving abroad")


@pytest.mark.parametrize(
    "current,target",
    [
        (S.PENDING, S.COMPLETED),
        (S.PENDING, S.ACTIVE),
        (S.PENDING, S.CANCELLED),
        (S.APPROVED, S.PENDING),
        (S.APPROVED, S.REJECTED),
        (S.ACTIVE, S.APPROVED),
        (S.COMPLETED, S.ACTIVE),
        (S.REJECTED, S.APPROVED),
        (S.CANCELLED, S.APPROVED),
    ],
)
def test_other_transitions_are_illegal(current, target):
    with pytest.raises(IllegalTransition) as exc_info:
        assert_booking_transition(current, target, OWNER, reason="because")

    assert exc_info.value.status_code == 403
    assert f"{current.value} → {target.value}" in exc_info.value.detail


@pytest.mark.parametrize(
    "current,target,actor",
    [
        (S.PENDING, S.APPROVED, RENTER),
        (S.PENDING, S.REJECTED, RENTER),
        (S.PENDING, S.APPROVED, SYSTEM),
        (S.APPROVED, S.ACTIVE, RENTER),
        (S.ACTIVE, S.COMPLETED, RENTER),
        (S.APPROVED, S.CANCELLED, SYSTEM),
    ],
)
def test_wrong_role_is_unauthorized(current, target, actor):
    with pytest.raises(Unauthorized):
        assert_booking_transition(current, target, actor, reason="because")


@pytest.mark.parametrize("reason", [None, "", "   "])
def test_cancel_requires_reason(reason):
    with pytest.raises(MissingCancellationReason):
        assert_booking_transition(S.APPROVED, S.CANCELLED, RENTER, reason=reason)


def test_terminal_statuses_have_no_exits():
    terminal = {status for status, targets in BOOKING_TRANSITIONS.items() if not targets}
    assert terminal == {S.REJECTED, S.COMPLETED, S.CANCELLED}


def test_blocking_statuses():
    assert BLOCKING_STATUSES == {S.APPROVED, S.ACTIVE}


@pytest.mark.parametrize(
    "current,target,expected",
    [
        (S.PENDING, S.APPROVED, False),
        (S.APPROVED, S.CANCELLED, True),
        (S.PENDING, S.REJECTED, None),
        (S.APPROVED, S.ACTIVE, None),
        (S.ACTIVE, S.COMPLETED, None),
        (S.ACTIVE, S.CANCELLED, None),
    ],
)
def test_availability_after(current, target, expected):
    assert availability_after(current, target) is expected
