"""Property schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PropertyCreate(BaseModel):
    """Schema for listing a property."""

    title: str = Field(..., min_length=1, max_length=100)
    rent_price: int = Field(..., ge=0)  # monthly, in cents
    security_deposit: int = Field(default=0, ge=0)
    is_available: bool = True


class PropertyAvailabilityUpdate(BaseModel):
    """Schema for an owner opening or closing a property."""

    is_available: bool


class PropertyResponse(BaseModel):
    """Schema for property response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    title: str
    rent_price: int
    security_deposit: int
    is_available: bool
    created_at: datetime
    updated_at: datetime
