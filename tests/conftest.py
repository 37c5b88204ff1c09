"""Pytest configuration and fixtures."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import db_models.all_models  # noqa: F401
from database import Base, get_db
from main import app
from services.kv_store import KVStore
from factories import make_csv


@pytest.fixture
def db_session():
    """Session bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db_session):
    return KVStore(db_session)


@pytest.fixture
def client(db_session):
    """API client whose requests share the test session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def balanced_csv():
    return make_csv([
        ("1000", "Cash", 5000, 0),
        ("1100", "Accounts Receivable", 2500, 0),
        ("2000", "Accounts Payable", 0, 1500),
        ("3000", "Owner Equity", 0, 3000),
        ("4000", "Sales Revenue", 0, 8000),
        ("6000", "Rent Expense", 5000, 0),
    ])
