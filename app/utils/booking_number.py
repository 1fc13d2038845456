"""Booking reference generation."""

import random
import string

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

BOOKING_NUMBER_PREFIX = "RENT"


async def generate_booking_number(db: AsyncSession) -> str:
    """Generate a unique booking number in format RENT-XXXXXX.

    Args:
        db: Database session for uniqueness check

    Returns:
        str: Unique booking number like 'RENT-A3B7K9'
    """
    from app.models.booking import Booking

    chars = string.ascii_uppercase + string.digits
    while True:
        random_part = "".join(random.choices(chars, k=6))
        booking_number = f"{BOOKING_NUMBER_PREFIX}-{random_part}"

        result = await db.execute(
            select(Booking.id).where(Booking.booking_number == booking_number)
        )
        if result.scalar_one_or_none() is None:
            return booking_number
