"""
Timesheet use cases: the lifecycle engine wired to the repository.

Mutations load the target row without a visibility filter so the engine can
answer with AuthorizationError when someone other than the owner or
assigned manager tries to act on it. Reads are
visibility-checked and report invisible rows as not found.

Reject with feedback is two writes. The status change is committed first; the
comment insert is attempted only afterwards, and if it fails the rejection
stands and the failure is returned to the caller in ``comment_error``.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from app.errors import CollaboratorError, NotFoundError, ValidationError
from app.models.profile import Profile, Role
from app.models.project import Project
from app.models.timesheet import Timesheet, TimesheetComment
from app.services import analytics, lifecycle
from app.services.audit import log_action
from app.services.lifecycle import Actor
from app.services.repository import SqlRepository

logger = logging.getLogger(__name__)

DEFAULT_ORDER = ("-date", "-created_at")


@dataclass
class ReviewResult:
    timesheet: Timesheet
    comment: Optional[TimesheetComment] = None
    comment_error: Optional[str] = None


# ──────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────

def _as_uuid(value: Any, label: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(f"Invalid {label}")


def _load(repo: SqlRepository, timesheet_id: uuid.UUID) -> Timesheet:
    ts = repo.get(Timesheet, timesheet_id)
    if ts is None:
        raise NotFoundError("Timesheet not found")
    return ts


def owner_manager_id(repo: SqlRepository, employee_id: uuid.UUID) -> Optional[uuid.UUID]:
    owner = repo.get(Profile, employee_id)
    return owner.manager_id if owner else None


def team_member_ids(repo: SqlRepository, manager_id: uuid.UUID) -> list[uuid.UUID]:
    reports = repo.select(Profile, {"manager_id": manager_id})
    return [p.id for p in reports]


# ──────────────────────────────────────────────
# Reads
# ──────────────────────────────────────────────

def visible_timesheets(repo: SqlRepository, actor: Actor) -> list[Timesheet]:
    """All timesheets the actor may see, newest date first."""
    if actor.role is Role.employee:
        return repo.select(Timesheet, {"employee_id": actor.id}, order_by=DEFAULT_ORDER)
    if actor.role is Role.manager:
        ids = team_member_ids(repo, actor.id)
        if not ids:
            return []
        return repo.select(Timesheet, {"employee_id": ids}, order_by=DEFAULT_ORDER)
    if actor.role is Role.admin:
        return repo.select(Timesheet, order_by=DEFAULT_ORDER)
    raise ValueError(f"Unhandled role: {actor.role!r}")


def list_timesheets(
    repo: SqlRepository,
    actor: Actor,
    project_id: Optional[uuid.UUID] = None,
    employee_id: Optional[uuid.UUID] = None,
    status: Optional[str] = None,
    date_from=None,
    date_to=None,
) -> list[Timesheet]:
    return analytics.filter_timesheets(
        visible_timesheets(repo, actor),
        project_id=project_id,
        employee_id=employee_id,
        status=status,
        date_from=date_from,
        date_to=date_to,
    )


def get_timesheet(repo: SqlRepository, actor: Actor, timesheet_id: uuid.UUID) -> Timesheet:
    ts = _load(repo, timesheet_id)
    if not lifecycle.can_view(actor, ts, owner_manager_id(repo, ts.employee_id)):
        raise NotFoundError("Timesheet not found")
    return ts


def list_comments(repo: SqlRepository, actor: Actor, timesheet_id: uuid.UUID) -> list[TimesheetComment]:
    get_timesheet(repo, actor, timesheet_id)
    return repo.select(TimesheetComment, {"timesheet_id": timesheet_id}, order_by=("created_at",))


def comments_for(repo: SqlRepository, timesheets: list[Timesheet]) -> dict[uuid.UUID, list[TimesheetComment]]:
    """Group the comments of already-visible timesheets by timesheet id."""
    ids = [t.id for t in timesheets]
    grouped = {i: [] for i in ids}
    if not ids:
        return grouped
    for c in repo.select(TimesheetComment, {"timesheet_id": ids}, order_by=("created_at",)):
        grouped[c.timesheet_id].append(c)
    return grouped


# ──────────────────────────────────────────────
# Mutations
# ──────────────────────────────────────────────

def create_timesheet(
    repo: SqlRepository,
    actor: Actor,
    project_id: Any,
    day: Any,
    task_description: Optional[str],
    hours_worked: Any,
    notes: Optional[str] = "",
) -> Timesheet:
    project = repo.get(Project, _as_uuid(project_id, "project id"))
    row = lifecycle.create_timesheet(actor, project, day, task_description, hours_worked, notes)
    ts = repo.insert(Timesheet, row)
    logger.info("Timesheet %s created by %s (%s h on %s)", ts.id, actor.id, ts.hours_worked, ts.date)
    return ts


def update_timesheet(repo: SqlRepository, actor: Actor, timesheet_id: uuid.UUID, fields: dict) -> Timesheet:
    ts = _load(repo, timesheet_id)
    fields = dict(fields)
    project = None
    if "project_id" in fields:
        fields["project_id"] = _as_uuid(fields["project_id"], "project id")
        project = repo.get(Project, fields["project_id"])
    changes = lifecycle.update_timesheet(actor, ts, fields, project=project)
    if not changes:
        return ts
    ts = repo.update(Timesheet, ts.id, changes)
    logger.info("Timesheet %s updated by %s: %s", ts.id, actor.id, sorted(changes))
    return ts


def submit_timesheet(repo: SqlRepository, actor: Actor, timesheet_id: uuid.UUID) -> Timesheet:
    ts = _load(repo, timesheet_id)
    changes = lifecycle.submit_timesheet(actor, ts)
    ts = repo.update(Timesheet, ts.id, changes)
    logger.info("Timesheet %s submitted by %s", ts.id, actor.id)
    log_action(repo.db, actor.id, "timesheet.submit", "timesheet", ts.id)
    return ts


def approve_timesheet(repo: SqlRepository, actor: Actor, timesheet_id: uuid.UUID) -> Timesheet:
    ts = _load(repo, timesheet_id)
    changes = lifecycle.approve_timesheet(actor, ts, owner_manager_id(repo, ts.employee_id))
    ts = repo.update(Timesheet, ts.id, changes)
    logger.info("Timesheet %s approved by %s", ts.id, actor.id)
    log_action(repo.db, actor.id, "timesheet.approve", "timesheet", ts.id)
    return ts


def reject_timesheet(
    repo: SqlRepository,
    actor: Actor,
    timesheet_id: uuid.UUID,
    comment: Optional[str] = "",
) -> ReviewResult:
    ts = _load(repo, timesheet_id)
    changes, comment_row = lifecycle.reject_timesheet(
        actor, ts, owner_manager_id(repo, ts.employee_id), comment
    )
    ts = repo.update(Timesheet, ts.id, changes)
    logger.info("Timesheet %s rejected by %s", ts.id, actor.id)

    result = ReviewResult(timesheet=ts)
    if comment_row is not None:
        try:
            result.comment = repo.insert(TimesheetComment, comment_row)
        except CollaboratorError as exc:
            # the rejection stays committed; the caller is told the feedback was lost
            logger.error("Timesheet %s rejected but comment was not saved: %s", ts.id, exc.message)
            result.comment_error = exc.message

    log_action(
        repo.db, actor.id, "timesheet.reject", "timesheet", ts.id,
        details={"comment_saved": result.comment is not None, "comment_error": result.comment_error},
    )
    return result


def delete_timesheet(repo: SqlRepository, actor: Actor, timesheet_id: uuid.UUID) -> None:
    ts = _load(repo, timesheet_id)
    lifecycle.check_delete(actor, ts)
    repo.delete(Timesheet, ts.id)
    logger.info("Timesheet %s deleted by %s", timesheet_id, actor.id)
