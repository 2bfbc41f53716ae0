"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Seeded companies, jobs and users
- Auth headers for a regular user and an admin
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import create_access_token, get_password_hash
from app.models.application import Application
from app.models.company import Company
from app.models.job import Job
from app.models.user import User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
def seed_companies(db_session):
    """Three companies; c3 has no jobs"""
    companies = [
        Company(handle="c1", name="C1", num_employees=1, description="Desc1", logo_url="http://c1.img"),
        Company(handle="c2", name="C2", num_employees=2, description="Desc2", logo_url="http://c2.img"),
        Company(handle="c3", name="C3", num_employees=3, description="Desc3", logo_url="http://c3.img"),
    ]
    db_session.add_all(companies)
    db_session.commit()
    return companies


@pytest.fixture
def seed_jobs(db_session, seed_companies):
    """Jobs J1-J3 at c1 and J4 at c2; only J1 and J2 offer equity"""
    jobs = [
        Job(title="J1", salary=1, equity=0.1, company_handle="c1"),
        Job(title="J2", salary=2, equity=0.2, company_handle="c1"),
        Job(title="J3", salary=3, equity=0, company_handle="c1"),
        Job(title="J4", salary=None, equity=None, company_handle="c2"),
    ]
    db_session.add_all(jobs)
    db_session.commit()
    return {job.title: job.id for job in jobs}


@pytest.fixture
def test_user(db_session):
    """Regular (non-admin) user u1 with password 'password1'"""
    user = User(
        username="u1",
        hashed_password=get_password_hash("password1"),
        first_name="U1F",
        last_name="U1L",
        email="user1@user.com",
        is_admin=False,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def other_user(db_session):
    """Second regular user u2"""
    user = User(
        username="u2",
        hashed_password=get_password_hash("password2"),
        first_name="U2F",
        last_name="U2L",
        email="user2@user.com",
        is_admin=False,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session):
    """Admin user"""
    user = User(
        username="admin",
        hashed_password=get_password_hash("adminpass"),
        first_name="Ad",
        last_name="Min",
        email="admin@jobly.com",
        is_admin=True,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def user_headers(test_user):
    """Bearer headers for u1"""
    token = create_access_token(test_user.username, test_user.is_admin)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    """Bearer headers for the admin"""
    token = create_access_token(admin_user.username, admin_user.is_admin)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def application(db_session, test_user, seed_jobs):
    """u1 has applied to J1"""
    app_row = Application(username=test_user.username, job_id=seed_jobs["J1"])
    db_session.add(app_row)
    db_session.commit()
    return app_row
