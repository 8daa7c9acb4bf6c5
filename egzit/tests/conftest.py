"""
Centralized Test Configuration.
"""

import pytest
import httpx
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from egzit.app.main import app
from egzit.app.db.session import get_db, Base
from egzit.app.core.reliability import CircuitBreaker
from egzit.app.core.security import get_password_hash
from egzit.app.models.enums import UserRole
from egzit.app.models.mover import Mover
from egzit.app.models.move_enums import VehicleClass
from egzit.app.models.user import User
from egzit.app.services.route_service import RouteEstimator, RouteServiceClient, get_route_estimator
import egzit.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PASSWORD = "admin-pass-123"
CUSTOMER_PASSWORD = "customer-pass-123"

KINGSTON_ADDRESS = "22 Main Street, Kingston"
MONTEGO_BAY_ADDRESS = "8 Church Street, Montego Bay"


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        return not self._closed

    async def setex(self, key, ttl, value):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def aclose(self):
        self._closed = True
        self.store = {}


class FakeRouteService:
    """Programmable stand-in for the OSRM /route endpoint."""

    def __init__(self):
        self.duration = 5400.0
        self.distance = 152000.0
        self.fail_status = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"code": "Error", "message": "unavailable"})
        return httpx.Response(200, json={
            "code": "Ok",
            "routes": [
                {
                    "distance": self.distance,
                    "duration": self.duration,
                    "geometry": {"coordinates": [[-76.7920, 17.9714], [-77.8939, 18.4762]]},
                },
                {
                    "distance": self.distance + 9000,
                    "duration": self.duration + 600,
                    "geometry": {"coordinates": [[-76.7920, 17.9714], [-77.5, 18.2], [-77.8939, 18.4762]]},
                },
            ],
        })


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def mock_redis(monkeypatch):
    fake = MockRedis()
    monkeypatch.setattr(redis_client_module, "redis_client", fake)
    return fake


@pytest.fixture
def route_service():
    return FakeRouteService()


@pytest.fixture
def route_estimator(route_service):
    client = RouteServiceClient(
        base_url="http://osrm.test",
        timeout=1.0,
        transport=httpx.MockTransport(route_service.handler),
    )
    return RouteEstimator(
        client=client,
        breaker=CircuitBreaker("test_route_service", failure_threshold=3, reset_timeout=60),
        default_duration=3600,
    )


@pytest.fixture(autouse=True)
def apply_overrides(session_factory, mock_redis, route_estimator):
    """Point the app at the in-memory database, fake Redis and fake route service."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_route_estimator] = lambda: route_estimator
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


async def _login(client, username: str, password: str) -> dict:
    response = await client.post("/v1/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def admin_headers(client, db_session):
    db_session.add(User(
        email="admin@egzit.com",
        username="admin",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        role=UserRole.ADMIN,
        is_active=True,
    ))
    await db_session.commit()
    return await _login(client, "admin", ADMIN_PASSWORD)


@pytest.fixture
def register_customer(client):
    """Register a customer through the API and return auth headers."""

    async def _register(username: str) -> dict:
        response = await client.post("/v1/auth/register", json={
            "email": f"{username}@example.com",
            "username": username,
            "password": CUSTOMER_PASSWORD,
            "full_name": username.title(),
        })
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _register


@pytest.fixture
async def customer_headers(register_customer):
    return await register_customer("marcia")


@pytest.fixture
async def mover_id(db_session):
    mover = Mover(name="Island Movers Ltd", phone="876-555-0101", vehicle_class=VehicleClass.TRUCK, available=True)
    db_session.add(mover)
    await db_session.commit()
    await db_session.refresh(mover)
    return mover.id
