"""
Pytest configuration and shared fixtures for the Job Portal tests.
"""
import os
import sys
from datetime import timedelta

# Settings are read once at import time; these must be in place first
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-tokens-12345678901234567890")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.main import app
from backend.api.dependencies import get_scheduler
from backend.models.db.database import get_db, Base
from backend.models.db import crud
from backend.models.db.job_role import JobRole
from backend.security import get_password_hash
from backend.services.scheduler_service import SchedulerService
from backend.services.seed_service import seed_bands, seed_capabilities, seed_statuses
from backend.utils.validators import utc_today

OPEN_STATUS_ID = 1


# Test Database Setup
@pytest.fixture(scope="function")
def test_db_engine():
    """A fresh in-memory SQLite database for every test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session_factory(test_db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)


@pytest.fixture(scope="function")
def test_db_session(test_session_factory):
    """Create a test database session with lookup tables seeded."""
    session = test_session_factory()
    seed_statuses(session)
    seed_bands(session)
    seed_capabilities(session)
    yield session
    session.close()


@pytest.fixture(scope="function")
def test_scheduler(test_session_factory):
    """A scheduler registry bound to the test database. Not started."""
    scheduler = SchedulerService(test_session_factory)
    yield scheduler
    scheduler.destroy()


@pytest.fixture(scope="function")
def test_client(test_db_session, test_scheduler):
    """Create a test client with overridden database and scheduler dependencies."""
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_scheduler] = lambda: test_scheduler
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# User Fixtures
@pytest.fixture
def test_user_data():
    """Sample applicant credentials."""
    return {
        "email": "applicant@example.com",
        "password": "testpassword123",
    }


@pytest.fixture
def admin_user_data():
    return {
        "email": "admin@example.com",
        "password": "adminpassword123",
    }


@pytest.fixture
def admin_user(test_db_session, admin_user_data):
    """Create an admin user directly in the database."""
    return crud.create_user(
        test_db_session,
        email=admin_user_data["email"],
        hashed_password=get_password_hash(admin_user_data["password"]),
        role="admin",
    )


@pytest.fixture
def auth_headers(test_client, test_user_data):
    """Register an applicant and return its bearer header."""
    response = test_client.post("/auth/register", json=test_user_data)
    assert response.status_code == 201
    token = response.json()["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(test_client, admin_user, admin_user_data):
    """Log the admin in and return its bearer header."""
    response = test_client.post("/auth/login", json=admin_user_data)
    assert response.status_code == 200
    token = response.json()["token"]
    return {"Authorization": f"Bearer {token}"}


# Job Role Fixtures
@pytest.fixture
def make_job_role(test_db_session):
    """Factory inserting a job role straight into the database."""
    def _make_job_role(**overrides):
        values = {
            "role_name": "Software Engineer",
            "location": "Belfast",
            "capability_id": 1,
            "band_id": 2,
            "status_id": OPEN_STATUS_ID,
            "closing_date": utc_today() + timedelta(days=30),
            "open_positions": 1,
            "deleted": False,
        }
        values.update(overrides)
        job_role = JobRole(**values)
        test_db_session.add(job_role)
        test_db_session.commit()
        test_db_session.refresh(job_role)
        return job_role

    return _make_job_role


@pytest.fixture
def open_job_role(make_job_role):
    return make_job_role()


@pytest.fixture
def application_data(open_job_role):
    """A valid submission against `open_job_role`."""
    return {
        "jobRoleId": open_job_role.id,
        "emailAddress": "applicant@example.com",
        "phoneNumber": "07912345678",
        "coverLetter": "I would like to apply.",
    }
