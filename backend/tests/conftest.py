"""
Shared fixtures: in-memory SQLite database, FastAPI test client and record
factories for users, sessions and API keys.
"""
import os

os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import uniyelp.models  # noqa: F401
from uniyelp.core.config import get_settings
from uniyelp.core.database import Base, get_db
from uniyelp.crud.user import create_api_key
from uniyelp.models.base import generate_id
from uniyelp.models.catalog import AcademicCourse, AcademicProgram, College, Department, University
from uniyelp.models.user import User, UserSession


@pytest.fixture
def engine():
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
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# =============================================================================
# Record factories
# =============================================================================


@pytest.fixture
def make_user(db):
    def factory(role: str = "user", name: str = "Test User") -> User:
        user = User(name=name, email=f"{generate_id(8)}@example.edu", role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return factory


@pytest.fixture
def session_cookie(db):
    """Create a session for a user and return the matching Cookie header"""
    def factory(user: User, expires_in: timedelta = timedelta(hours=1)) -> dict:
        token = generate_id(32)
        db.add(UserSession(
            token=token,
            user_id=user.id,
            expires_at=datetime.now(timezone.utc) + expires_in,
        ))
        db.commit()
        return {"Cookie": f"{get_settings().SESSION_COOKIE_NAME}={token}"}
    return factory


@pytest.fixture
def api_key(db):
    """Create an API key for a user and return the raw key"""
    def factory(user: User, **kwargs) -> str:
        _, raw_key = create_api_key(db, user.id, get_settings().API_KEY_PREFIX, **kwargs)
        return raw_key
    return factory


@pytest.fixture
def admin(make_user):
    return make_user(role="admin", name="Admin")


@pytest.fixture
def member(make_user):
    return make_user(role="user", name="Member")


@pytest.fixture
def catalog(db):
    """One university with one college, three departments, programs and courses"""
    university = University(name="State University", slug="state-university")
    db.add(university)
    db.flush()

    college = College(university_id=university.id, name="College of Engineering", slug="college-of-engineering")
    departments = [Department(name=f"Department {n}", slug=f"department-{n}") for n in range(3)]
    programs = [AcademicProgram(name=f"Program {n}", code=f"PRG{n}") for n in range(3)]
    courses = [AcademicCourse(name=f"Course {n}", code=f"CRS{n}") for n in range(3)]
    db.add_all([college, *departments, *programs, *courses])
    db.commit()

    return SimpleNamespace(
        university=university,
        college=college,
        departments=departments,
        programs=programs,
        courses=courses,
    )
