"""
Shared fixtures: in-memory database, seeded principals, authenticated client.
"""

import os

# Must be set before anything under app/ reads its configuration
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.authorization import (
    SCHEDULE_ADMINISTRATORS_ROLE,
    SCHEDULE_MANAGERS_ROLE,
    Principal,
)
from app.database import Base, get_db
from app.main import app
from app.models import Role, Schedule, ScheduleStatus, User
from app.security_utils import create_access_token

# 2025-01-06 is a Monday
MONDAY = date(2025, 1, 6)


@pytest.fixture
def engine():
    """Fresh in-memory database per test, one shared connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def users(db):
    """U1, U2 ordinary users; M1 manager; A1 administrator."""
    admins = Role(name=SCHEDULE_ADMINISTRATORS_ROLE)
    managers = Role(name=SCHEDULE_MANAGERS_ROLE)
    created = {
        "U1": User(id="U1", user_name="u1@example.com", email="u1@example.com"),
        "U2": User(id="U2", user_name="u2@example.com", email="u2@example.com"),
        "M1": User(id="M1", user_name="m1@example.com", email="m1@example.com", roles=[managers]),
        "A1": User(id="A1", user_name="a1@example.com", email="a1@example.com", roles=[admins]),
    }
    db.add_all([admins, managers, *created.values()])
    db.commit()
    return created


@pytest.fixture
def principals(users):
    return {key: Principal.from_user(user) for key, user in users.items()}


@pytest.fixture
def make_schedule(db, users):
    """Insert a schedule directly, bypassing the workflow."""

    def _make(owner_id="U1", day=MONDAY, start=time(9, 0), end=time(17, 0), status=ScheduleStatus.SUBMITTED):
        schedule = Schedule(owner_id=owner_id, date=day, start_time=start, end_time=end, status=status)
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(users):
    """auth_headers("U1") -> Authorization header for that user"""

    def _headers(user_id):
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers
