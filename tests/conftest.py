"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client
- Seed companies, jobs and users with their tokens
"""

import os

# Must be set before the application settings are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_WORK_FACTOR"] = "4"
os.environ["SECRET_KEY"] = "test"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from jobly.core.database import Base, SessionLocal, engine, get_db
from jobly.core.security import create_access_token, get_password_hash
from jobly.models import Company, Job, User
from main import app


@pytest.fixture
def db_session():
    """
    Create fresh tables and a session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
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
def companies(db_session):
    """nike (30000 employees), apple (100000), sans-serif-labs (1)"""
    rows = [
        Company(handle="nike", name="Nike, Inc", num_employees=30000,
                description="Designer, manufacturer, and vendor of athletic shoes",
                logo_url="https://nike-logo-url.com/"),
        Company(handle="apple", name="Apple Computer, Inc", num_employees=100000,
                description="Manufacturer of computer hardware and software",
                logo_url="https://apple-logo-url.com/"),
        Company(handle="sans-serif-labs", name="sans-serif, LLC", num_employees=1,
                description="Freelance Goon",
                logo_url="https://sans-serif-logo-url.com/"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


@pytest.fixture
def jobs(db_session, companies):
    """
    Four jobs posted a day apart; newest first they are:
    designer, CEO, software engineer 2, software engineer 1.
    """
    rows = [
        Job(title="software engineer 1", salary=80000.0, equity=0.001, company_handle="apple",
            date_posted=datetime(2024, 1, 1, tzinfo=timezone.utc)),
        Job(title="software engineer 2", salary=100000.0, equity=0.005, company_handle="apple",
            date_posted=datetime(2024, 1, 2, tzinfo=timezone.utc)),
        Job(title="CEO", salary=800000.0, equity=0.99, company_handle="sans-serif-labs",
            date_posted=datetime(2024, 1, 3, tzinfo=timezone.utc)),
        Job(title="designer", salary=90000.0, equity=0.003, company_handle="nike",
            date_posted=datetime(2024, 1, 4, tzinfo=timezone.utc)),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


@pytest.fixture
def test_user(db_session):
    """Regular (non-admin) user `firstTester` with password `secret`"""
    user = User(
        username="firstTester",
        first_name="first",
        last_name="tester",
        email="fakie@faker.com",
        password=get_password_hash("secret"),
        photo_url="https://photobooth.com",
        is_admin=False,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session):
    """Admin user `adminTester` with password `secret`"""
    user = User(
        username="adminTester",
        first_name="admin",
        last_name="tester",
        email="admin@faker.com",
        password=get_password_hash("secret"),
        is_admin=True,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def user_headers(test_user):
    token = create_access_token(test_user.username, is_admin=False)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token(admin_user.username, is_admin=True)
    return {"Authorization": f"Bearer {token}"}
