"""Pytest configuration for all tests."""

import os

# Settings are read once and cached, so the test environment must be in
# place before anything from keychain is imported.
os.environ.setdefault("KEYCHAIN_ENVIRONMENT", "testing")
os.environ.setdefault("KEYCHAIN_SECRET_KEY", "test-secret-key-" + "x" * 64)
os.environ.setdefault("KEYCHAIN_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("KEYCHAIN_PASSWORD_HASH_COST", "1")
os.environ.setdefault("KEYCHAIN_PASSWORD_HASH_MEMORY_COST", "1024")
os.environ.setdefault("KEYCHAIN_PASSWORD_HASH_PARALLELISM", "1")

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from keychain.domain.services import UUIDIdentity  # noqa: E402
from keychain.infrastructure.auth import ClaimsCodec, PasswordHasher, TokenService  # noqa: E402
from keychain.infrastructure.persistence.database import Base  # noqa: E402

TEST_SECRET = "unit-test-signing-key-" + "k" * 64
NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for token issuance and expiry."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hasher() -> PasswordHasher:
    """A cheap hasher for tests."""
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def codec() -> ClaimsCodec:
    return ClaimsCodec(UUIDIdentity(as_string=True))


@pytest.fixture
def token_service(clock: FakeClock) -> TokenService:
    return TokenService(TEST_SECRET, "HS256", clock=clock)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from keychain.infrastructure.api.app import app
    from keychain.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}
