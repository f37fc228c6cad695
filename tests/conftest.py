"""
Shared pytest fixtures.

- In-memory SQLite Database with the schema applied
- FastAPI TestClient wired to that database (lifespan not run, no Redis)
- Helpers to authenticate as a given external identity
"""
import pytest
from fastapi.testclient import TestClient

from app.core.database import Database
from app.core.dependencies import get_external_identity
from app.schema.auth import ExternalIdentity
from app.service.schema_service import SchemaManager
from app.session import SessionStore
from main import app


@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    database = Database.from_url("sqlite://")
    SchemaManager(database).ensure_schema()
    yield database
    database.dispose()


@pytest.fixture
def client(db):
    app.state.db = db
    app.state.session_store = None
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.db = None


@pytest.fixture
def alice() -> ExternalIdentity:
    return ExternalIdentity(
        external_id="cognito-alice-000001",
        email="alice@example.com",
        first_name="Alice",
        last_name="Liddell",
        username="alice",
        avatar_url="https://cdn.example.com/alice.png",
    )


@pytest.fixture
def bob() -> ExternalIdentity:
    return ExternalIdentity(
        external_id="cognito-bob-000002",
        email="bob@example.com",
        first_name="Bob",
    )


@pytest.fixture
def login():
    """Authenticate subsequent requests as the given identity."""

    def _login(identity: ExternalIdentity) -> None:
        app.dependency_overrides[get_external_identity] = lambda: identity

    return _login


@pytest.fixture
def count_rows(db):
    def _count(table: str) -> int:
        return db.execute(f"SELECT COUNT(*) AS n FROM {table}")[0]["n"]

    return _count


class FakeRedis:
    """In-memory stand-in for the redis commands SessionStore uses."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        value = self.data.get(key)
        return value if isinstance(value, str) else None

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def sadd(self, key, *members):
        self.data.setdefault(key, set()).update(members)

    def smembers(self, key):
        return set(self.data.get(key, set()))

    def expire(self, key, ttl):
        self.ttls[key] = ttl

    def exists(self, *keys):
        return sum(1 for key in keys if key in self.data)

    def delete(self, *keys):
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    def close(self):
        pass


@pytest.fixture
def session_store():
    return SessionStore(FakeRedis(), session_ttl=60)
