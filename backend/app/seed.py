"""
Seed script for the timesheet tracker: creates demo users and projects.

Run: python -m app.seed
"""
import logging
import os
import sys

from app.database import Base, SessionLocal, engine
from app.errors import TimesheetAppError
from app.models import audit_log, profile, project, timesheet  # noqa: F401  (register tables)
from app.models.profile import AuthIdentity, Profile, Role
from app.models.project import Project
from app.services.repository import SqlRepository

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_PASSWORD = os.getenv("SEED_PASSWORD", "Timesheets@2026!")

DEMO_USERS = [
    {"email": "admin@example.com", "full_name": "Ada Admin", "role": Role.admin},
    {"email": "manager@example.com", "full_name": "Morgan Manager", "role": Role.manager},
    {"email": "employee@example.com", "full_name": "Emery Employee", "role": Role.employee},
]

DEMO_PROJECTS = [
    {"name": "Internal Tools", "description": "Back-office tooling and automation"},
    {"name": "Client Onboarding", "description": "Implementation work for new accounts"},
]


def seed_user(repo: SqlRepository, email: str, full_name: str, role: Role, manager_id=None) -> Profile:
    existing = repo.select(AuthIdentity, {"email": email})
    if existing:
        logger.info("User %s already exists, skipping.", email)
        return repo.get(Profile, existing[0].id)

    identity_id = repo.create_identity(email, DEMO_PASSWORD)
    user = repo.insert(Profile, {
        "id": identity_id,
        "email": email,
        "full_name": full_name,
        "role": role.value,
        "manager_id": manager_id,
    })
    logger.info("Created %s: %s (%s)", role.value, full_name, email)
    return user


def seed_projects(repo: SqlRepository, created_by) -> int:
    created = 0
    for data in DEMO_PROJECTS:
        if repo.select(Project, {"name": data["name"]}):
            continue
        repo.insert(Project, {**data, "created_by": created_by})
        created += 1
    return created


def run_seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    repo = SqlRepository(db)
    try:
        admin, manager, employee = DEMO_USERS
        admin_profile = seed_user(repo, **admin)
        manager_profile = seed_user(repo, **manager)
        seed_user(repo, **employee, manager_id=manager_profile.id)

        created = seed_projects(repo, admin_profile.id)
        if created:
            logger.info("Seeded %d projects.", created)
        else:
            logger.info("Projects already exist, skipping.")

        logger.info("Seed complete. Demo password: %s", DEMO_PASSWORD)
        logger.info("  >>> CHANGE THESE PASSWORDS OUTSIDE LOCAL DEVELOPMENT <<<")
    except TimesheetAppError:
        logger.exception("Seed failed")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    run_seed()
