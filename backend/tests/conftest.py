"""
Pytest Configuration File

Every test gets a fresh in-memory SQLite database, a repository over it, and
a small org chart:

    admin
    manager  ── employee
    manager2 ── employee2
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_MODE"] = "demo"

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine, get_db
from app.models.profile import Profile, Role
from app.models.project import Project, ProjectStatus
from app.services.lifecycle import Actor
from app.services.repository import SqlRepository
from main import app

TEST_PASSWORD = "correct-horse"


@pytest.fixture
def db():
    """Fresh schema per test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repo(db):
    return SqlRepository(db)


def _make_profile(repo, email, full_name, role, manager_id=None):
    identity_id = repo.create_identity(email, TEST_PASSWORD)
    return repo.insert(Profile, {
        "id": identity_id,
        "email": email,
        "full_name": full_name,
        "role": role.value,
        "manager_id": manager_id,
    })


@pytest.fixture
def people(repo):
    """Admin, two managers and one report each"""
    admin = _make_profile(repo, "admin@test.com", "Ada Admin", Role.admin)
    manager = _make_profile(repo, "manager@test.com", "Morgan Manager", Role.manager)
    manager2 = _make_profile(repo, "manager2@test.com", "Max Manager", Role.manager)
    employee = _make_profile(repo, "employee@test.com", "Emery Employee", Role.employee, manager.id)
    employee2 = _make_profile(repo, "employee2@test.com", "Eli Employee", Role.employee, manager2.id)
    return SimpleNamespace(
        admin=admin,
        manager=manager,
        manager2=manager2,
        employee=employee,
        employee2=employee2,
    )


@pytest.fixture
def actors(people):
    return SimpleNamespace(**{name: Actor.from_profile(p) for name, p in vars(people).items()})


@pytest.fixture
def projects(repo, people):
    active = repo.insert(Project, {"name": "Apollo", "description": "Launch work", "created_by": people.admin.id})
    inactive = repo.insert(Project, {
        "name": "Zeus",
        "description": "Retired",
        "status": ProjectStatus.inactive.value,
        "created_by": people.admin.id,
    })
    return SimpleNamespace(active=active, inactive=inactive)


@pytest.fixture
def test_client(db):
    """FastAPI test client bound to the per-test database"""
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    """Build demo-mode auth headers for a profile"""
    def _headers(profile):
        return {"X-User-Id": str(profile.id)}
    return _headers
