"""
Pytest fixtures for test database, client, and authentication.

Uses an in-memory SQLite database (shared through a StaticPool) that is
created and dropped around every test for isolation.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime, timezone, timedelta
from types import SimpleNamespace
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from venue_booking.main import app
from venue_booking.db.base import Base
from venue_booking.db.session import get_db, session_dependency
from venue_booking.core.security import create_access_token, hash_password
from venue_booking.models import Event, User, Venue
from venue_booking.services.interfaces.storage import ImageStorage
from venue_booking.services.storage_factory import get_image_storage

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


class InMemoryImageStorage(ImageStorage):
    """Keeps uploaded images in a dict instead of on disk."""

    def __init__(self, max_bytes: int = 5 * 1024 * 1024, max_count: int = 5):
        super().__init__(max_bytes, max_count)
        self.files: dict[str, bytes] = {}
        self.written = 0

    async def write(self, filename: str, content: bytes) -> str:
        self.written += 1
        ref = f"memory://{self.written}-{filename}"
        self.files[ref] = content
        return ref

    async def delete(self, ref: str) -> None:
        self.files.pop(ref, None)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def image_storage() -> InMemoryImageStorage:
    return InMemoryImageStorage()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, image_storage: InMemoryImageStorage) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB and storage dependencies."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: image_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, email: str, role: str, name: str) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("testpassword123"),
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def _headers(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def organizer(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "organizer@example.com", "organizer", "Olivia Organizer")


@pytest_asyncio.fixture
async def venue_owner(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "owner@example.com", "venue_owner", "Victor Owner")


@pytest_asyncio.fixture
async def other_owner(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "other-owner@example.com", "venue_owner", "Bea Owner")


@pytest_asyncio.fixture
async def plain_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "user@example.com", "user", "Uma User")


@pytest_asyncio.fixture
async def organizer_headers(organizer: User) -> dict:
    return _headers(organizer)


@pytest_asyncio.fixture
async def owner_headers(venue_owner: User) -> dict:
    return _headers(venue_owner)


@pytest_asyncio.fixture
async def other_owner_headers(other_owner: User) -> dict:
    return _headers(other_owner)


@pytest_asyncio.fixture
async def user_headers(plain_user: User) -> dict:
    return _headers(plain_user)


@pytest_asyncio.fixture
async def test_venue(db_session: AsyncSession, venue_owner: User) -> Venue:
    """Available venue: capacity 100, 400 per day."""
    venue = Venue(
        owner=venue_owner,
        name="Grand Hall",
        address="1 Main Street",
        capacity=100,
        price_per_day=400,
        amenities=["wifi", "parking"],
        images=[],
        availability=True,
        rating=0.0,
    )
    db_session.add(venue)
    await db_session.commit()
    await db_session.refresh(venue)
    return venue


@pytest_asyncio.fixture
async def unavailable_venue(db_session: AsyncSession, venue_owner: User) -> Venue:
    venue = Venue(
        owner=venue_owner,
        name="Closed Hall",
        address="2 Main Street",
        capacity=100,
        price_per_day=400,
        amenities=[],
        images=[],
        availability=False,
        rating=0.0,
    )
    db_session.add(venue)
    await db_session.commit()
    await db_session.refresh(venue)
    return venue


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, organizer: User, test_venue: Venue) -> Event:
    """Pending event at ``test_venue``."""
    event = Event(
        organizer_id=organizer.id,
        venue=test_venue,
        title="Python Conference",
        description="Annual Python gathering",
        event_date=datetime.now(timezone.utc) + timedelta(days=30),
        event_time="10:00",
        expected_attendees=50,
        budget=500,
        price=20,
        category="Conference",
        requirements=[],
        images=[],
        venue_request_message="Can we book the hall?",
    )
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def file_sessions(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """
    Sessions over a file database, each on its own connection, so one
    session only sees what another has committed.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'venue_booking.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def committing_client(
    file_sessions: async_sessionmaker, image_storage: InMemoryImageStorage,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests get their own session and commit or roll back on exit."""
    app.dependency_overrides[get_db] = session_dependency(file_sessions)
    app.dependency_overrides[get_image_storage] = lambda: image_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def committed_booking(file_sessions: async_sessionmaker) -> SimpleNamespace:
    """A venue owner, an organizer, a reviewer, one venue and one pending event, all committed."""
    async with file_sessions() as session:
        password = hash_password("testpassword123")
        owner = User(name="Victor Owner", email="owner@example.com", hashed_password=password, role="venue_owner")
        organizer = User(name="Olivia Organizer", email="organizer@example.com", hashed_password=password, role="organizer")
        reviewer = User(name="Uma User", email="user@example.com", hashed_password=password, role="user")
        venue = Venue(
            owner=owner,
            name="Grand Hall",
            address="1 Main Street",
            capacity=100,
            price_per_day=400,
            amenities=[],
            images=[],
            availability=True,
            rating=0.0,
        )
        session.add_all([owner, organizer, reviewer, venue])
        await session.flush()

        event = Event(
            organizer_id=organizer.id,
            venue=venue,
            title="Python Conference",
            description="Annual Python gathering",
            event_date=datetime.now(timezone.utc) + timedelta(days=30),
            event_time="10:00",
            expected_attendees=50,
            budget=500,
            price=20,
            category="Conference",
            requirements=[],
            images=[],
        )
        session.add(event)
        await session.commit()

        return SimpleNamespace(
            venue_id=venue.id,
            event_id=event.id,
            owner_headers=_headers(owner),
            reviewer_headers=_headers(reviewer),
        )

def event_payload(venue_id: int, **overrides) -> dict:
    payload = {
        "title": "Python Conference 2026",
        "description": "Annual Python gathering",
        "venue_id": venue_id,
        "event_date": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
        "event_time": "10:00",
        "expected_attendees": 50,
        "budget": 500,
        "category": "Conference",
        "price": 25,
    }
    payload.update(overrides)
    return payload
