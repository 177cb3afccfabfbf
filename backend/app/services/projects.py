"""
Project administration. Admins manage every project; everyone else only
sees active projects, which are the ones new timesheets may reference.
"""

import logging
import uuid

from app.errors import AuthorizationError, NotFoundError, ValidationError
from app.models.profile import Role
from app.models.project import Project, ProjectStatus
from app.models.timesheet import Timesheet
from app.services.audit import log_action
from app.services.lifecycle import Actor, require_text
from app.services.repository import SqlRepository

logger = logging.getLogger(__name__)


def _require_admin(actor: Actor) -> None:
    if actor.role is not Role.admin:
        raise AuthorizationError("Only admins can manage projects")


def _parse_status(value) -> ProjectStatus:
    try:
        return ProjectStatus(value)
    except ValueError:
        raise ValidationError("Project status must be 'active' or 'inactive'")


def list_projects(repo: SqlRepository, actor: Actor, include_inactive: bool = False) -> list[Project]:
    if include_inactive and actor.role is Role.admin:
        return repo.select(Project, order_by=("name",))
    return repo.select(Project, {"status": ProjectStatus.active.value}, order_by=("name",))


def get_project(repo: SqlRepository, project_id: uuid.UUID) -> Project:
    project = repo.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


def create_project(repo: SqlRepository, actor: Actor, name: str, description: str = "", status="active") -> Project:
    _require_admin(actor)
    project = repo.insert(Project, {
        "name": require_text(name, "Project name"),
        "description": (description or "").strip(),
        "status": _parse_status(status).value,
        "created_by": actor.id,
    })
    logger.info("Project %s (%s) created by %s", project.id, project.name, actor.id)
    log_action(repo.db, actor.id, "project.create", "project", project.id)
    return project


def update_project(repo: SqlRepository, actor: Actor, project_id: uuid.UUID, fields: dict) -> Project:
    _require_admin(actor)
    get_project(repo, project_id)
    changes = {}
    if "name" in fields:
        changes["name"] = require_text(fields["name"], "Project name")
    if "description" in fields:
        changes["description"] = (fields["description"] or "").strip()
    if "status" in fields:
        changes["status"] = _parse_status(fields["status"]).value
    project = repo.update(Project, project_id, changes)
    logger.info("Project %s updated by %s: %s", project_id, actor.id, sorted(changes))
    log_action(repo.db, actor.id, "project.update", "project", project_id, details=changes)
    return project


def delete_project(repo: SqlRepository, actor: Actor, project_id: uuid.UUID) -> None:
    _require_admin(actor)
    get_project(repo, project_id)
    if repo.select(Timesheet, {"project_id": project_id}):
        raise ValidationError("Project has logged timesheets; mark it inactive instead")
    repo.delete(Project, project_id)
    logger.info("Project %s deleted by %s", project_id, actor.id)
    log_action(repo.db, actor.id, "project.delete", "project", project_id)
