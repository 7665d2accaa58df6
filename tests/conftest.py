"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client
- Seed companies, jobs and users
- Bearer tokens for a regular user and an admin
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import create_access_token, get_password_hash
from app.models import Company, Job, User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE and FK checks unless asked."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Hashing is slow on purpose; do it once for the whole run
PASSWORD_HASHES = {
    "u1": get_password_hash("password1"),
    "admin1": get_password_hash("password2"),
}


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seed(db_session):
    """
    Companies c1..c3 (1..3 employees), jobs j1..j4 and users u1 / admin1.

    j4 belongs to c1 and has no equity.
    Returns the job ids keyed by title.
    """
    db_session.add_all([
        Company(handle="c1", name="C1", num_employees=1, description="Desc1", logo_url="http://c1.img"),
        Company(handle="c2", name="C2", num_employees=2, description="Desc2", logo_url="http://c2.img"),
        Company(handle="c3", name="C3", num_employees=3, description="Desc3", logo_url="http://c3.img"),
    ])
    db_session.flush()

    jobs = [
        Job(title="j1", salary=100000, equity=0.01, company_handle="c1"),
        Job(title="j2", salary=200000, equity=0.02, company_handle="c2"),
        Job(title="j3", salary=300000, equity=0.03, company_handle="c3"),
        Job(title="j4", salary=400000, equity=None, company_handle="c1"),
    ]
    db_session.add_all(jobs)

    db_session.add_all([
        User(username="u1", password=PASSWORD_HASHES["u1"], first_name="U1F", last_name="U1L",
             email="user1@user.com", is_admin=False),
        User(username="admin1", password=PASSWORD_HASHES["admin1"], first_name="A1F", last_name="A1L",
             email="admin1@user.com", is_admin=True),
    ])
    db_session.commit()

    return {job.title: job.id for job in jobs}


@pytest.fixture
def u1_headers():
    """Authorization header for the regular user u1"""
    return {"Authorization": f"Bearer {create_access_token('u1', is_admin=False)}"}


@pytest.fixture
def admin_headers():
    """Authorization header for the admin admin1"""
    return {"Authorization": f"Bearer {create_access_token('admin1', is_admin=True)}"}
