"""
Shared test fixtures.

Every test gets its own in-memory SQLite database, so no data
leaks between tests and nothing touches disk.
"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from finance_tracker.config import Settings
from finance_tracker.main import create_app
from finance_tracker.models.base import Database
from finance_tracker.services.ledger_service import LedgerService
from finance_tracker.services.ledger_store import LedgerStore
from finance_tracker.services.user_service import UserService
from finance_tracker.services.user_store import UserStore


class TickingClock:
    """Returns a timestamp one second later on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def database():
    """A fresh in-memory database with all tables created."""
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def ledger_store(database, clock):
    return LedgerStore(database, clock=clock)


@pytest.fixture
def ledger_service(ledger_store):
    return LedgerService(ledger_store)


@pytest.fixture
def settings():
    test_settings = Settings()
    test_settings.JWT_SECRET = "test-secret-for-the-finance-tracker-suite"
    test_settings.JWT_EXPIRES_MINUTES = 5
    return test_settings


@pytest.fixture
def user_service(database, settings):
    return UserService(UserStore(database), settings)


@pytest.fixture
def client(settings, database):
    """A test client wired to the per-test database."""
    app = create_app(settings=settings, database=database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_and_login(client):
    """
    Return a helper that registers a user and returns auth headers.

    Usage: headers = register_and_login("alice")
    """
    def _register_and_login(username="alice", password="secret123"):
        client.post("/api/register", json={
            "username": username,
            "password": password,
        })
        response = client.post("/api/login", json={
            "username": username,
            "password": password,
        })
        token = response.json()["token"]
        return {"Authorization": f"Bearer {token}"}

    return _register_and_login


@pytest.fixture
def auth_headers(register_and_login):
    return register_and_login()
