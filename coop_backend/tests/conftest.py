"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from coop_backend.app.main import app
from coop_backend.app.db.session import get_db, Base
from coop_backend.app.core.redis_client import get_redis
from coop_backend.app.core.jwt import create_access_token
from coop_backend.app.core.security import get_password_hash
from coop_backend.app.models.bus import Bus
from coop_backend.app.models.enums import AppRole, BusStatus
from coop_backend.app.models.user import User, Profile, UserRoleAssignment

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

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

# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self.expiry = {}
        self.fail = False
    
    def _check(self):
        if self.fail:
            raise ConnectionError("redis unavailable")
    
    async def ping(self):
        self._check()
        return True
    
    async def get(self, key):
        self._check()
        return self.store.get(key)
        
    async def set(self, key, value, ex=None):
        self._check()
        self.store[key] = value
        self.expiry[key] = ex
        return True
    
    async def delete(self, key):
        self._check()
        if key in self.store:
            del self.store[key]
            return 1
        return 0
        
    async def flushdb(self):
        self.store = {}
        self.expiry = {}


@pytest.fixture
def redis_client():
    return MockRedis()

@pytest.fixture(autouse=True)
def apply_overrides(redis_client):
    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_redis():
        return redis_client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    yield
    app.dependency_overrides = {}

@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def make_user(db_session):
    """
    Factory creating an active user with a profile and the given roles.
    
    Returns the User; password is always "secret123".
    """
    counter = {"n": 0}
    
    async def _make(email, roles=(), first_name="Test", surname="User", with_profile=True):
        counter["n"] += 1
        user = User(
            email=email,
            hashed_password=get_password_hash("secret123"),
            is_active=True
        )
        db_session.add(user)
        await db_session.flush()
        
        if with_profile:
            db_session.add(Profile(
                user_id=user.id,
                first_name=first_name,
                surname_1=surname,
                id_number=f"0900000{counter['n']:03d}",
                phone="0999999999",
                address="Quito"
            ))
        for role in roles:
            db_session.add(UserRoleAssignment(user_id=user.id, role=AppRole(role)))
        
        await db_session.commit()
        return user
    
    return _make


@pytest.fixture
def make_bus(db_session):
    async def _make(plate, status=BusStatus.IN_SERVICE, alias=None, owner=None, driver=None, official=None):
        bus = Bus(
            plate=plate,
            alias=alias,
            status=status,
            owner_id=owner.id if owner else None,
            driver_id=driver.id if driver else None,
            official_id=official.id if official else None,
        )
        db_session.add(bus)
        await db_session.commit()
        return bus
    
    return _make


@pytest.fixture
def auth_headers():
    """Bearer header for a user, with the roles carried in the token."""
    def _headers(user, roles=()):
        token = create_access_token(data={
            "sub": user.email,
            "user_id": user.id,
            "roles": [AppRole(role).value for role in roles]
        })
        return {"Authorization": f"Bearer {token}"}

    return _headers
