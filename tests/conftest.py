"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")
os.environ.setdefault("LIFECYCLE_SWEEP_ENABLED", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.immutability import register_immutability_enforcement
from app.core.security import create_access_token
from app.database import Base, get_db
from app.main import app
from app.models.property import Property
from app.models.user import User, UserRole
from app.services.booking_service import BookingService

register_immutability_enforcement()


def _auth_headers(user: User) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user."""
    return _auth_headers


@pytest.fixture
async def engine(tmp_path):
    # A file database so that concurrent sessions get their own connections
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _create_user(db: AsyncSession, *, email: str, role: UserRole, is_active: bool = True) -> User:
    user = User(email=email, name=email.split("@")[0].title(), role=role, is_active=is_active)
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def owner(db) -> User:
    return await _create_user(db, email="owner@rentline.test", role=UserRole.OWNER)


@pytest.fixture
async def other_owner(db) -> User:
    return await _create_user(db, email="owner2@rentline.test", role=UserRole.OWNER)


@pytest.fixture
async def renter(db) -> User:
    return await _create_user(db, email="renter@rentline.test", role=UserRole.RENTER)


@pytest.fixture
async def other_renter(db) -> User:
    return await _create_user(db, email="renter2@rentline.test", role=UserRole.RENTER)


@pytest.fixture
async def rental(db, owner) -> Property:
    """Available property: rent 1000 a month, deposit 500."""
    prop = Property(
        owner_id=owner.id,
        title="Two-bed flat",
        rent_price=1000,
        security_deposit=500,
        is_available=True,
    )
    db.add(prop)
    await db.commit()
    return prop


@pytest.fixture
async def service_session(session_maker):
    """Session the service under test writes through; fixtures live in `db`."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def service(service_session) -> BookingService:
    return BookingService(service_session)


@pytest.fixture
def reload(db):
    """Fetch the committed state of a row through the fixture session."""

    async def _reload(model, ident):
        return await db.get(model, ident, populate_existing=True)

    return _reload
