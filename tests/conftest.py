"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests.
"""
import itertools
import os
from datetime import date

SQLITE_URL = "sqlite:///./test_recovery_insights.db"

os.environ.setdefault("DATABASE_URL", SQLITE_URL)
os.environ.setdefault("TIMEZONE", "UTC")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import recovery_insights.models  # noqa: F401  (registers every table on Base)
from recovery_insights.db.base import Base, get_db
from recovery_insights.main import app
from recovery_insights.services.record_store import RecordStore

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_emails = itertools.count(1)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def profile(db):
    """A fresh profile per test, so rows never leak between tests."""
    return RecordStore(db).create_profile({
        "email": f"user{next(_emails)}@example.com",
        "name": "Test User",
        "start_date": date(2026, 9, 1),
    })
