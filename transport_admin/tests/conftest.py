"""
Centralized Test Configuration.
"""

from types import SimpleNamespace

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.pool import StaticPool

from transport_admin.app.main import app
from transport_admin.app.db.session import Database
from transport_admin.app.core.jwt import create_access_token
from transport_admin.app.models.company import Company
from transport_admin.app.models.vehicle_owner import VehicleOwner
from transport_admin.app.models.driver import Driver
from transport_admin.app.models.manager import Manager

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


class BrokenRedis(MockRedis):
    """Redis that is down: every call raises."""

    async def exists(self, key):
        raise ConnectionError("redis unavailable")

    async def ping(self):
        raise ConnectionError("redis unavailable")


@pytest.fixture
async def database():
    """Fresh in-memory database per test."""
    db = Database(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(db.engine.sync_engine, "connect", set_sqlite_pragma)
    await db.create_all()

    yield db

    await db.drop_all()
    await db.dispose()


@pytest.fixture
def redis_client():
    return MockRedis()


@pytest.fixture(autouse=True)
def app_state(database, redis_client):
    """
    Wire the app to the test database and redis.

    ASGITransport does not run the lifespan, so app.state is set directly.
    """
    app.state.database = database
    app.state.redis = redis_client
    yield app
    app.state.database = None
    app.state.redis = None


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def lenient_client():
    """Client that returns 500 responses instead of re-raising app errors."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
async def parties(db_session):
    """Two of each reference party; driver_a works for owner_a, driver_b for owner_b."""
    company_a = Company(name="Acme Chemicals", email="ops@acme.example", phone="9800000001")
    company_b = Company(name="Borealis Oils", email="ops@borealis.example", phone="9800000002")
    owner_a = VehicleOwner(name="Konkan Tankers", email="fleet@konkan.example")
    owner_b = VehicleOwner(name="Deccan Haulage", email="fleet@deccan.example")
    manager_a = Manager(name="Asha Patil", email="asha@admin.example")
    manager_b = Manager(name="Vikram Rao", email="vikram@admin.example")
    db_session.add_all([company_a, company_b, owner_a, owner_b, manager_a, manager_b])
    await db_session.flush()

    driver_a = Driver(name="Ravi Kumar", email="ravi@konkan.example", vehicle_owner_id=owner_a.id)
    driver_b = Driver(name="Sunil Jadhav", email="sunil@deccan.example", vehicle_owner_id=owner_b.id)
    db_session.add_all([driver_a, driver_b])
    await db_session.commit()

    return SimpleNamespace(
        company_a=company_a.id,
        company_b=company_b.id,
        owner_a=owner_a.id,
        owner_b=owner_b.id,
        driver_a=driver_a.id,
        driver_b=driver_b.id,
        manager_a=manager_a.id,
        manager_b=manager_b.id,
    )


def make_token(role: str, user_id: int = 1, **claims) -> str:
    return create_access_token({"sub": f"{role}-{user_id}", "user_id": user_id, "role": role, **claims})


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def broken_redis(app_state):
    """Swap in a redis that raises on every call."""
    app_state.state.redis = BrokenRedis()
    return app_state.state.redis


@pytest.fixture
def token_for():
    """Factory: token_for("admin") -> raw bearer token string."""
    return make_token


@pytest.fixture
def headers_for():
    """Factory: headers_for("company", company_id=3) -> Authorization header."""
    def _headers(role: str, user_id: int = 1, **claims) -> dict:
        return bearer(make_token(role, user_id, **claims))
    return _headers


@pytest.fixture
def admin_headers(headers_for):
    return headers_for("admin", user_id=1)


@pytest.fixture
def company_headers(headers_for, parties):
    return headers_for("company", user_id=100, company_id=parties.company_a)


@pytest.fixture
def other_company_headers(headers_for, parties):
    return headers_for("company", user_id=101, company_id=parties.company_b)


@pytest.fixture
def manager_headers(headers_for, parties):
    return headers_for("manager", user_id=400, manager_id=parties.manager_a)


@pytest.fixture
def vehicle_owner_headers(headers_for, parties):
    return headers_for("vehicle_owner", user_id=200, vehicle_owner_id=parties.owner_a)


@pytest.fixture
def driver_headers(headers_for, parties):
    return headers_for("driver", user_id=300, driver_id=parties.driver_a)


@pytest.fixture
def transport_request_payload():
    """Scenario A: 12000 liters, urgent, refrigerated, temperature control + insurance."""
    return {
        "material_type": "Liquid Nitrogen",
        "quantity": 12000,
        "quantity_unit": "liters",
        "pickup_location": "Taloja MIDC",
        "drop_location": "Pune Chakan",
        "preferred_date": "2026-11-02",
        "urgency": "urgent",
        "contact_person": "Meera Shah",
        "contact_phone": "9820012345",
        "vehicle_type": "Refrigerated Truck",
        "temperature_control": True,
        "hazardous_material": False,
        "insurance_required": True,
    }


@pytest.fixture
def create_trip(client, admin_headers, parties):
    """Factory: create a trip through the API as admin, return its JSON."""
    counter = {"n": 0}

    async def _create(**overrides) -> dict:
        counter["n"] += 1
        payload = {
            "trip_number": f"TR-{counter['n']:03d}",
            "company_id": parties.company_a,
            "vehicle_owner_id": parties.owner_a,
            "driver_id": parties.driver_a,
            "manager_id": parties.manager_a,
            "route": "Taloja MIDC → Pune Chakan",
            "base_amount": 20000,
            "service_charge": 2000,
        }
        payload.update(overrides)
        response = await client.post("/v1/trips", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_payment(client, admin_headers, parties):
    """Factory: record a payment through the API as admin, return its JSON."""
    async def _create(trip: dict, amount: float = 5000, **overrides) -> dict:
        payload = {
            "trip_id": trip["id"],
            "company_id": trip["company_id"],
            "vehicle_owner_id": trip["vehicle_owner_id"],
            "amount": amount,
        }
        payload.update(overrides)
        response = await client.post("/v1/payments", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
