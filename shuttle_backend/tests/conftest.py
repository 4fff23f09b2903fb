"""
Centralized Test Configuration.
"""

import datetime as dt

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from shuttle_backend.app.main import app
from shuttle_backend.app.db.session import get_db, Base
from shuttle_backend.app.core.redis_client import get_redis
from shuttle_backend.app.core.reliability import sms_circuit_breaker
from shuttle_backend.app.services.sms_gateway import SmsDeliveryError, SmsGateway, get_sms_gateway

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class MockRedis:
    """In-memory stand-in for the handful of Redis calls dispatch makes."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None, nx=False):
        if nx and key in self.store:
            return None
        self.store[key] = value
        return True

    async def delete(self, key):
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def flushdb(self):
        self.store = {}


class RecordingSmsGateway(SmsGateway):
    """Keeps every message; phones listed in `failing` raise on send."""

    def __init__(self):
        self.sent = []
        self.failing = set()

    async def send(self, phone: str, message: str) -> None:
        if phone in self.failing:
            raise SmsDeliveryError(f"provider rejected {phone}")
        self.sent.append((phone, message))


mock_redis = MockRedis()


@pytest.fixture
def sms_gateway():
    return RecordingSmsGateway()


@pytest.fixture(autouse=True)
def apply_overrides(sms_gateway):
    """Route the app to the test database, the fake Redis and the recording gateway."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_redis():
        return mock_redis

    async def override_get_sms_gateway():
        return sms_gateway

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_sms_gateway] = override_get_sms_gateway
    sms_circuit_breaker.reset_state()
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await mock_redis.flushdb()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def service_date():
    return dt.date(2024, 5, 1)


@pytest.fixture
def now():
    return dt.datetime(2024, 4, 30, 18, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
async def seeded(db_session, service_date, now):
    """Demo fleet plus the representative 08:00 / 10:00 bookings."""
    from shuttle_backend.seed_shuttle_data import seed_demo_data

    return await seed_demo_data(db_session, service_date, now)


@pytest.fixture
def redis_mock():
    return mock_redis


@pytest.fixture
def session_factory():
    """For tests that need several independent sessions, like two dispatchers."""
    return TestingSessionLocal
