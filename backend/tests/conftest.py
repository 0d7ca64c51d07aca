"""Shared fixtures: in-memory SQLite backend, storage root and HTTP client."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from nectar import models  # noqa: F401
from nectar.database import Base, configure_engine, get_db
from nectar.models.class_ import Class, ClassTeacher
from nectar.models.course import Course
from nectar.models.department import Department
from nectar.models.enrollment import Enrollment
from nectar.models.user import AuthIdentity
from nectar.services import auth_service
from nectar.services.storage import StorageGateway, get_storage

PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_engine(engine)
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
def storage(tmp_path):
    return StorageGateway(str(tmp_path / "storage"), "https://project.supabase.co")


@pytest.fixture
def client(session_factory, storage):
    from nectar.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ── Data helpers ────────────────────────────────────────────────────────────

def make_user(db, email, role="student", full_name=None, **profile):
    """Register an identity and profile with the shared test password."""
    if role in ("student", "cr"):
        profile.setdefault("student_id", email.split("@")[0].upper())
        profile.setdefault("batch", "2021")
    if role != "admin":
        profile.setdefault("dept_code", "CSE")
    profile["role"] = role
    profile["full_name"] = full_name or email.split("@")[0].title()
    return auth_service.register_user(db, email, PASSWORD, profile)


def token_for(db, user):
    identity = db.get(AuthIdentity, user.id)
    return auth_service.create_access_token(identity)


def auth_headers(db, user):
    return {"Authorization": f"Bearer {token_for(db, user)}"}


def make_department(db, code="CSE", name="Computer Science"):
    department = Department(code=code, name=name)
    db.add(department)
    db.commit()
    return department


def make_class(db, department, code="CSE-21A", session="2021-2022", section="A"):
    cls = Class(dept_id=department.id, session=session, section=section, code=code)
    db.add(cls)
    db.commit()
    return cls


def make_course(db, code="CSE101", name="Structured Programming", credits=3.0):
    course = Course(code=code, name=name, credits=credits)
    db.add(course)
    db.commit()
    return course


def enroll(db, user, cls, status="approved"):
    db.add(Enrollment(user_id=user.id, class_id=cls.id, status=status))
    db.commit()


def assign_teacher(db, teacher, cls):
    db.add(ClassTeacher(user_id=teacher.id, class_id=cls.id))
    db.commit()
