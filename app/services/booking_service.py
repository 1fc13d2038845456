"""Booking lifecycle orchestration.

Composes the conflict rules, pricing, payment ledger and state machine into
the operations exposed to the API. Every mutating operation runs as one unit:
it holds the in-process lock for the property (or booking) it touches, takes a
row lock where the database supports it, re-validates, writes, and commits
before the lock is released. Any error rolls the whole unit back.
"""

import logging
import math
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    AppException,
    BookingConflict,
    InvalidDateRange,
    NotFoundError,
    PropertyUnavailable,
    Unauthorized,
    ValidationError,
)
from app.core.locks import KeyedLock, property_locks
from app.domain.booking_state import (
    BLOCKING_STATUSES,
    ActorRole,
    BookingStatus,
    assert_booking_transition,
    availability_after,
)
from app.domain.payment_state import PaymentStatus, derive_payment_status
from app.domain.pricing import compute_total, months_between, recompute_totals
from app.models.booking import Booking, BookingMessage
from app.schemas.payment import PaymentCreate
from app.services.ledger_service import LedgerService
from app.services.property_service import PropertyService
from app.utils.booking_number import generate_booking_number

logger = logging.getLogger(__name__)


class BookingService:
    """Create bookings and drive them through their lifecycle."""

    def __init__(
        self,
        db: AsyncSession,
        properties: PropertyService | None = None,
        ledger: LedgerService | None = None,
        locks: KeyedLock = property_locks,
    ) -> None:
        self.db = db
        self.properties = properties or PropertyService(db)
        self.ledger = ledger or LedgerService(db)
        self.locks = locks

    @asynccontextmanager
    async def _atomic(self, key: Hashable) -> AsyncIterator[None]:
        async with self.locks.hold(key):
            try:
                yield
                await self.db.commit()
            except Exception:
                await self.db.rollback()
                raise

    async def _load(self, booking_id: UUID, *, for_update: bool = False) -> Booking:
        query = select(Booking).where(Booking.id == booking_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        booking = result.scalar_one_or_none()
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    @staticmethod
    def _assert_participant(booking: Booking, actor_id: UUID) -> None:
        if actor_id not in (booking.renter_id, booking.owner_id):
            raise Unauthorized("Not authorized to access this booking")

    @staticmethod
    def _assert_acting_as(booking: Booking, actor_id: UUID | None, role: ActorRole) -> None:
        """The actor must be the booking's party for the role they claim."""
        if role is ActorRole.SYSTEM:
            return
        expected = booking.owner_id if role is ActorRole.OWNER else booking.renter_id
        if actor_id != expected:
            raise Unauthorized(f"Only the booking's {role.value} can do this")

    # ==================== CONFLICTS & PRICING ====================

    async def has_conflict(
        self,
        property_id: UUID,
        start: date,
        end: date,
        exclude_booking_id: UUID | None = None,
    ) -> bool:
        """True if an approved/active booking on the property overlaps [start, end)."""
        query = select(Booking.id).where(
            Booking.property_id == property_id,
            Booking.status.in_(BLOCKING_STATUSES),
            Booking.start_date < end,
            Booking.end_date > start,
        )
        if exclude_booking_id is not None:
            query = query.where(Booking.id != exclude_booking_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def _property_held(self, property_id: UUID, exclude_booking_id: UUID) -> bool:
        result = await self.db.execute(
            select(Booking.id)
            .where(
                Booking.property_id == property_id,
                Booking.status.in_(BLOCKING_STATUSES),
                Booking.id != exclude_booking_id,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def quote(self, property_id: UUID, start: date, end: date) -> dict:
        """Price a prospective booking without creating it."""
        prop = await self.properties.get(property_id)
        if start >= end:
            return {"available": False, "unavailable_reason": "start_date must be before end_date"}
        if not prop.is_available:
            return {"available": False, "unavailable_reason": "Property is not available"}
        if await self.has_conflict(property_id, start, end):
            return {"available": False, "unavailable_reason": "Selected dates are not available"}

        months = months_between(start, end)
        return {
            "available": True,
            "price_breakdown": {
                "monthly_rent": prop.rent_price,
                "months": months,
                "rent_total": prop.rent_price * months,
                "security_deposit": prop.security_deposit,
                "total_amount": compute_total(prop.rent_price, prop.security_deposit, start, end),
            },
        }

    # ==================== LIFECYCLE ====================

    async def create(
        self,
        property_id: UUID,
        renter_id: UUID,
        start: date,
        end: date,
        special_requests: str | None = None,
    ) -> Booking:
        """Request a booking; it starts out pending."""
        async with self._atomic(property_id):
            prop = await self.properties.get(property_id, for_update=True)
            if not prop.is_available:
                raise PropertyUnavailable()
            if start >= end:
                raise InvalidDateRange(f"start_date {start} must be before end_date {end}")
            if prop.owner_id == renter_id:
                raise Unauthorized("You cannot book your own property")
            if await self.has_conflict(property_id, start, end):
                logger.info(f"Booking request on property {property_id} conflicts for {start}..{end}")
                raise BookingConflict()

            booking = Booking(
                booking_number=await generate_booking_number(self.db),
                property_id=property_id,
                renter_id=renter_id,
                owner_id=prop.owner_id,
                start_date=start,
                end_date=end,
                monthly_rent=prop.rent_price,
                security_deposit=prop.security_deposit,
                status=BookingStatus.PENDING,
                special_requests=special_requests,
                payments=[],
                messages=[],
            )
            recompute_totals(booking)
            # Nothing is paid yet, so a zero total is already settled
            booking.payment_status = derive_payment_status(0, booking.total_amount)
            self.db.add(booking)
            await self.db.flush()

        logger.info(
            f"Booking {booking.booking_number} requested on property {property_id} "
            f"({start}..{end}, total={booking.total_amount})"
        )
        return booking

    async def set_status(
        self,
        booking_id: UUID,
        actor_id: UUID | None,
        actor_role: ActorRole,
        new_status: BookingStatus,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> Booking:
        """Move a booking to ``new_status`` and keep property availability in step."""
        now = now or datetime.now(UTC)
        booking = await self._load(booking_id)

        async with self._atomic(booking.property_id):
            booking = await self._load(booking_id, for_update=True)
            self._assert_acting_as(booking, actor_id, actor_role)
            current = booking.status
            assert_booking_transition(current, new_status, actor_role, reason)

            if new_status is BookingStatus.ACTIVE and now.date() < booking.start_date:
                raise ValidationError(
                    f"Booking cannot become active before its start date {booking.start_date}"
                )
            if new_status is BookingStatus.COMPLETED and now.date() < booking.end_date:
                raise ValidationError(
                    f"Booking cannot be completed before its end date {booking.end_date}"
                )

            if new_status is BookingStatus.APPROVED:
                # Lock the property row so concurrent approvals serialize in the database too
                await self.properties.get(booking.property_id, for_update=True)
                if await self.has_conflict(
                    booking.property_id,
                    booking.start_date,
                    booking.end_date,
                    exclude_booking_id=booking.id,
                ):
                    raise BookingConflict()

            booking.status = new_status
            if new_status is BookingStatus.APPROVED:
                booking.approved_at = now
            elif new_status is BookingStatus.ACTIVE:
                booking.move_in_date = now.date()
            elif new_status is BookingStatus.COMPLETED:
                booking.completed_at = now
                booking.move_out_date = now.date()
            elif new_status is BookingStatus.CANCELLED:
                booking.cancelled_by = actor_id
                booking.cancellation_reason = reason.strip()
                booking.cancelled_at = now

            available = availability_after(current, new_status)
            if available and await self._property_held(booking.property_id, exclude_booking_id=booking.id):
                # Another approved/active booking still holds the property
                available = None
            if available is not None:
                await self.properties.set_available(booking.property_id, available)

            recompute_totals(booking)
            await self.db.flush()

        logger.info(
            f"Booking {booking.booking_number}: {current.value} -> {new_status.value} "
            f"by {actor_role.value} {actor_id or ''}".rstrip()
        )
        return booking

    # ==================== PAYMENTS ====================

    async def add_payment(
        self,
        booking_id: UUID,
        actor_id: UUID,
        entry: PaymentCreate,
        now: datetime | None = None,
    ) -> Booking:
        """Record a payment from either party of the booking."""
        booking = await self._load(booking_id)
        async with self._atomic(booking.property_id):
            booking = await self._load(booking_id, for_update=True)
            self._assert_participant(booking, actor_id)
            await self.ledger.append_payment(booking, entry, recorded_by=actor_id, now=now)
        return booking

    # ==================== MESSAGES ====================

    async def add_message(self, booking_id: UUID, sender_id: UUID, text: str) -> BookingMessage:
        async with self._atomic(booking_id):
            booking = await self._load(booking_id)
            self._assert_participant(booking, sender_id)
            message = BookingMessage(booking_id=booking.id, sender_id=sender_id, message=text)
            booking.messages.append(message)
            await self.db.flush()
        return message

    async def mark_messages_read(self, booking_id: UUID, reader_id: UUID) -> int:
        """Mark the other party's messages as read; returns how many changed."""
        async with self._atomic(booking_id):
            booking = await self._load(booking_id, for_update=True)
            self._assert_participant(booking, reader_id)
            unread = [m for m in booking.messages if m.sender_id != reader_id and not m.is_read]
            for message in unread:
                message.is_read = True
            await self.db.flush()
        return len(unread)

    # ==================== READS ====================

    async def _flag_overdue(self, booking: Booking, now: datetime) -> bool:
        """Apply the overdue policy to a fresh, locked copy of the booking.

        The in-memory copy may predate a payment committed elsewhere, so it is
        only used to skip bookings that cannot be past due.
        """
        if not self.ledger.is_past_due(booking, now):
            return False
        async with self._atomic(booking.property_id):
            booking = await self._load(booking.id, for_update=True)
            changed = self.ledger.mark_overdue_if_past_due(booking, now)
        return changed

    async def get_by_id(self, booking_id: UUID, actor_id: UUID, now: datetime | None = None) -> Booking:
        booking = await self._load(booking_id)
        self._assert_participant(booking, actor_id)
        await self._flag_overdue(booking, now or datetime.now(UTC))
        return booking

    async def list_for_user(
        self,
        user_id: UUID,
        role: ActorRole,
        status: BookingStatus | None = None,
        page: int = 1,
        page_size: int = 10,
        now: datetime | None = None,
    ) -> tuple[list[Booking], int]:
        """Bookings where the user is the renter or the owner, newest first."""
        if role is ActorRole.RENTER:
            query = select(Booking).where(Booking.renter_id == user_id)
        elif role is ActorRole.OWNER:
            query = select(Booking).where(Booking.owner_id == user_id)
        else:
            raise Unauthorized("Listing bookings requires an owner or renter")

        if status is not None:
            query = query.where(Booking.status == status)

        count_result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        total = count_result.scalar() or 0

        offset = (page - 1) * page_size
        result = await self.db.execute(
            query.order_by(Booking.created_at.desc(), Booking.id).offset(offset).limit(page_size)
        )
        bookings = list(result.scalars().all())

        now = now or datetime.now(UTC)
        for booking in bookings:
            await self._flag_overdue(booking, now)
        return bookings, total

    # ==================== SCHEDULED ====================

    async def sweep(self, now: datetime | None = None, auto_advance: bool | None = None) -> dict[str, int]:
        """Advance bookings whose dates have arrived and flag overdue payments."""
        now = now or datetime.now(UTC)
        if auto_advance is None:
            auto_advance = settings.auto_advance_bookings
        today = now.date()
        counts = {"activated": 0, "completed": 0, "overdue": 0, "failed": 0}

        if auto_advance:
            for current, target, column, key in (
                (BookingStatus.APPROVED, BookingStatus.ACTIVE, Booking.start_date, "activated"),
                (BookingStatus.ACTIVE, BookingStatus.COMPLETED, Booking.end_date, "completed"),
            ):
                result = await self.db.execute(
                    select(Booking.id).where(Booking.status == current, column <= today)
                )
                for booking_id in result.scalars().all():
                    try:
                        await self.set_status(booking_id, None, ActorRole.SYSTEM, target, now=now)
                    except AppException as e:
                        counts["failed"] += 1
                        logger.warning(f"Could not move booking {booking_id} to {target.value}: {e.detail}")
                    else:
                        counts[key] += 1

        result = await self.db.execute(
            select(Booking).where(
                Booking.status.in_(BLOCKING_STATUSES),
                Booking.payment_status.in_([PaymentStatus.PENDING, PaymentStatus.PARTIAL]),
            )
        )
        for booking in result.scalars().all():
            if await self._flag_overdue(booking, now):
                counts["overdue"] += 1

        logger.info(f"Booking sweep at {now.isoformat()}: {counts}")
        return counts


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size else 0
