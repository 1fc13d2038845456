"""API dependencies for identity and service wiring."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError, Unauthorized
from app.core.security import token_subject
from app.database import get_db
from app.domain.booking_state import ActorRole
from app.models.user import User, UserRole
from app.services.booking_service import BookingService
from app.services.property_service import PropertyService

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Resolve the caller from a bearer token issued by the identity provider."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    user_id = token_subject(credentials.credentials)

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user


async def get_current_owner(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user and verify they are a property owner."""
    if current_user.role != UserRole.OWNER:
        raise Unauthorized("Access denied. Owner role required.")
    return current_user


async def get_current_renter(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user and verify they are a renter."""
    if current_user.role != UserRole.RENTER:
        raise Unauthorized("Access denied. Renter role required.")
    return current_user


def actor_role(user: User) -> ActorRole:
    """Lifecycle role the user acts under."""
    return ActorRole(user.role.value)


async def get_booking_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingService:
    return BookingService(db)


async def get_property_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PropertyService:
    return PropertyService(db)
