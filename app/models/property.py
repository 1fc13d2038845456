"""Property listing model.

Only the fields the booking lifecycle reads or writes live here; the rest of
the listing (address, photos, amenities) belongs to the listings service.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base

if TYPE_CHECKING:
    from app.models.user import User


class Property(Base):
    """Rental property."""

    __tablename__ = "properties"
    __table_args__ = (
        CheckConstraint("rent_price >= 0", name="ck_properties_rent_price_non_negative"),
        CheckConstraint("security_deposit >= 0", name="ck_properties_deposit_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)

    # Pricing (in cents)
    rent_price: Mapped[int] = mapped_column(Integer, nullable=False)  # per month
    security_deposit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="properties")
