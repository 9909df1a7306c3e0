"""Pytest configuration and fixtures."""

import os

# must be set before app.core.config is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import app.models  # noqa: E402,F401
from app.initial_data import init_seed  # noqa: E402
from app.models.client_model import Client  # noqa: E402
from app.services.capital_ledger import set_capital  # noqa: E402
from app.utils.database import Base, SessionLocal, engine, get_db, transaction  # noqa: E402
from main import app as fastapi_app  # noqa: E402


@pytest.fixture
def db():
    """Fresh schema with a seeded capital row for each test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    init_seed(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def api(db):
    """HTTP client bound to the test session."""

    def override_get_db():
        yield db

    fastapi_app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(fastapi_app)
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture
def today() -> date:
    """Fixed 'today' used for status derivation."""
    return date(2026, 1, 10)


@pytest.fixture
def borrower(db) -> Client:
    client = Client(full_name="Ana Perez", document="12345678", phone="555-0101")
    with transaction(db):
        db.add(client)
    return client


@pytest.fixture
def funded(db):
    """Capital set to 1000."""
    return set_capital(db, 1000)
