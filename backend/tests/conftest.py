"""
Pytest fixtures for test database, client, users, talents and slots.

Tables are created before and dropped after every test. Each HTTP request
gets its own session (commit on success, rollback on error) exactly like
production; fixtures persist through short-lived sessions of their own.

TEST_DATABASE_URL selects the database; it defaults to a local SQLite file.
"""

import os

TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL", "sqlite+aiosqlite:///./talentshare_test.db"
)
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["REDIS_ENABLED"] = "false"

from datetime import date, timedelta
from typing import AsyncGenerator, Callable

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from talentshare.main import app
from talentshare.db.base import Base
from talentshare.db.session import get_db, enable_sqlite_savepoints
from talentshare.core.security import create_access_token, hash_password
from talentshare.models import User, Talent, Slot

if TEST_DATABASE_URL.startswith("sqlite"):
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )
    enable_sqlite_savepoints(test_engine)
else:
    test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)

TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

PASSWORD = "testpassword123"
PASSWORD_HASH = hash_password(PASSWORD)


def tomorrow() -> date:
    return date.today() + timedelta(days=1)


async def persist(obj):
    async with TestSessionLocal() as session:
        session.add(obj)
        await session.commit()
        await session.refresh(obj)
    return obj


@pytest_asyncio.fixture(autouse=True)
async def prepare_database() -> AsyncGenerator[None, None]:
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(prepare_database) -> AsyncGenerator[AsyncSession, None]:
    """Session for calling services directly."""
    async with TestSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client(prepare_database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with one fresh test session per request."""

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_user(prepare_database) -> Callable:
    async def _make_user(name: str, email: str) -> User:
        return await persist(User(name=name, email=email, hashed_password=PASSWORD_HASH))

    return _make_user


@pytest_asyncio.fixture
async def owner(make_user) -> User:
    return await make_user("Olivia Owner", "owner@example.com")


@pytest_asyncio.fixture
async def alice(make_user) -> User:
    return await make_user("Alice", "alice@example.com")


@pytest_asyncio.fixture
async def bob(make_user) -> User:
    return await make_user("Bob", "bob@example.com")


@pytest_asyncio.fixture
async def carol(make_user) -> User:
    return await make_user("Carol", "carol@example.com")


def auth_headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def headers_for() -> Callable[[User], dict]:
    return auth_headers_for


@pytest_asyncio.fixture
async def talent(owner: User) -> Talent:
    """Offline guitar class, two participants max."""
    return await persist(
        Talent(
            owner_id=owner.id,
            title="Guitar for Beginners",
            description="Chords, strumming and your first song",
            category="music",
            location="Seoul",
            is_online=False,
            max_participants=2,
        )
    )


@pytest_asyncio.fixture
async def slot(talent: Talent) -> Slot:
    return await persist(
        Slot(
            talent_id=talent.id,
            date=tomorrow(),
            start_time="10:00",
            end_time="12:00",
            current_participants=0,
        )
    )


@pytest_asyncio.fixture
async def other_talent(owner: User) -> Talent:
    return await persist(
        Talent(
            owner_id=owner.id,
            title="Python Basics",
            description="Variables, loops and functions",
            category="programming",
            location=None,
            is_online=True,
            max_participants=5,
        )
    )


@pytest_asyncio.fixture
async def other_slot(other_talent: Talent) -> Slot:
    return await persist(
        Slot(
            talent_id=other_talent.id,
            date=tomorrow(),
            start_time="18:00",
            end_time="19:30",
            current_participants=0,
        )
    )


@pytest_asyncio.fixture
async def get_slot() -> Callable:
    """Read a slot's committed state through a fresh session."""

    async def _get_slot(slot_id: int) -> Slot:
        async with TestSessionLocal() as session:
            return await session.get(Slot, slot_id)

    return _get_slot


@pytest_asyncio.fixture
async def book(client: AsyncClient, talent: Talent, slot: Slot) -> Callable:
    """POST a booking for the default slot as the given user."""

    async def _book(user: User, talent_id: int = None, slot_id: int = None):
        return await client.post(
            "/api/v1/bookings/",
            json={
                "talent_id": talent_id if talent_id is not None else talent.id,
                "slot_id": slot_id if slot_id is not None else slot.id,
            },
            headers=auth_headers_for(user),
        )

    return _book
