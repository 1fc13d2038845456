#!/usr/bin/env python3
"""Create (or reactivate) an owner and a renter for local testing.

Prints an access token for each, minted with the service's own secret.
"""

import asyncio

from sqlalchemy import select

from app.core.security import create_access_token
from app.database import async_session_maker
from app.models.user import User, UserRole


async def ensure_user(email: str, name: str, role: UserRole) -> User:
    """Create a user if it doesn't exist."""
    async with async_session_maker() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user:
            user.role = role
            user.is_active = True
            print(f"Updated existing {role.value}: {email}")
        else:
            user = User(email=email, name=name, role=role, is_active=True)
            session.add(user)
            print(f"Created {role.value}: {email}")
        await session.commit()
        return user


async def create_users(owner_email: str, renter_email: str) -> None:
    owner = await ensure_user(owner_email, "Test Owner", UserRole.OWNER)
    renter = await ensure_user(renter_email, "Test Renter", UserRole.RENTER)

    print(f"\nOWNER_TOKEN={create_access_token({'sub': str(owner.id)})}")
    print(f"RENTER_TOKEN={create_access_token({'sub': str(renter.id)})}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create test owner and renter users")
    parser.add_argument("--owner-email", default="owner@rentline.test", help="Owner email")
    parser.add_argument("--renter-email", default="renter@rentline.test", help="Renter email")
    args = parser.parse_args()

    asyncio.run(create_users(args.owner_email, args.renter_email))
