"""Property collaborator used by the booking lifecycle.

Reads and writes go through the caller's session so that availability changes
commit or roll back together with the booking write that caused them.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BookingConflict, NotFoundError, Unauthorized
from app.domain.booking_state import BLOCKING_STATUSES
from app.models.booking import Booking
from app.models.property import Property
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


class PropertyService:
    """Lookup and availability toggling for properties."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, property_id: UUID, *, for_update: bool = False) -> Property:
        """Load a property, optionally taking a row lock for the transaction."""
        query = select(Property).where(Property.id == property_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        prop = result.scalar_one_or_none()
        if prop is None:
            raise NotFoundError("Property", str(property_id))
        return prop

    async def set_available(self, property_id: UUID, available: bool) -> Property:
        prop = await self.get(property_id, for_update=True)
        if prop.is_available != available:
            prop.is_available = available
            logger.info(f"Property {property_id} availability set to {available}")
        await self.db.flush()
        return prop

    async def create(
        self,
        owner: User,
        title: str,
        rent_price: int,
        security_deposit: int,
        is_available: bool = True,
    ) -> Property:
        """Register a property for an owner."""
        if owner.role != UserRole.OWNER:
            raise Unauthorized("Only owners can list properties")
        prop = Property(
            owner_id=owner.id,
            title=title,
            rent_price=rent_price,
            security_deposit=security_deposit,
            is_available=is_available,
        )
        self.db.add(prop)
        await self.db.flush()
        return prop

    async def update_availability(self, property_id: UUID, owner_id: UUID, available: bool) -> Property:
        """Owner-driven availability change.

        Completed tenancies leave a property closed; this is how the owner
        reopens it. Reopening is refused while an approved or active booking
        still holds the property.
        """
        prop = await self.get(property_id, for_update=True)
        if prop.owner_id != owner_id:
            raise Unauthorized("Only the property owner can change its availability")

        if available:
            result = await self.db.execute(
                select(Booking.id)
                .where(
                    Booking.property_id == property_id,
                    Booking.status.in_(BLOCKING_STATUSES),
                )
                .limit(1)
            )
            if result.scalar_one_or_none() is not None:
                raise BookingConflict(
                    "Property still has an approved or active booking"
                )

        return await self.set_available(property_id, available)
