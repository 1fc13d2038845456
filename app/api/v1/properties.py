"""Property endpoints.

Only the pieces the booking lifecycle needs: owners register a property,
anyone signed in can read it, and owners open or close it.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_owner, get_current_user, get_property_service
from app.core.locks import property_locks
from app.models.property import Property
from app.models.user import User
from app.schemas.property import (
    PropertyAvailabilityUpdate,
    PropertyCreate,
    PropertyResponse,
)
from app.services.property_service import PropertyService

router = APIRouter()


@router.post("/", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    property_data: PropertyCreate,
    current_user: Annotated[User, Depends(get_current_owner)],
    service: Annotated[PropertyService, Depends(get_property_service)],
) -> Property:
    """List a new property (owner only)."""
    return await service.create(
        owner=current_user,
        title=property_data.title,
        rent_price=property_data.rent_price,
        security_deposit=property_data.security_deposit,
        is_available=property_data.is_available,
    )


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PropertyService, Depends(get_property_service)],
) -> Property:
    return await service.get(property_id)


@router.put("/{property_id}/availability", response_model=PropertyResponse)
async def update_property_availability(
    property_id: UUID,
    request: PropertyAvailabilityUpdate,
    current_user: Annotated[User, Depends(get_current_owner)],
    service: Annotated[PropertyService, Depends(get_property_service)],
) -> Property:
    """Open or close a property for new bookings."""
    async with property_locks.hold(property_id):
        prop = await service.update_availability(property_id, current_user.id, request.is_available)
        await service.db.commit()
    return prop
