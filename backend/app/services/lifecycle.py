"""
Timesheet lifecycle and authorization rules.

States:
  draft -> submitted -> approved | rejected

approved and rejected are terminal: a rejected entry is neither editable nor
resubmittable. Every function here is pure. Callers pass in what they loaded
(the acting profile, the timesheet, the owner's manager id) and get back the
field changes to persist, or a domain error.

Timesheets are duck-typed: anything with ``employee_id`` and ``status``
attributes works, so ORM rows and plain test objects are interchangeable.
"""

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from app.errors import AuthorizationError, InvalidTransitionError, ValidationError
from app.models.profile import Role
from app.models.project import ProjectStatus
from app.models.timesheet import TimesheetStatus

MIN_HOURS = Decimal("0")
MAX_HOURS = Decimal("24")
# matches the scale of timesheets.hours_worked
HOURS_PLACES = 2

EDITABLE_FIELDS = ("project_id", "date", "task_description", "hours_worked", "notes")


@dataclass(frozen=True)
class Actor:
    """The authenticated principal performing an operation."""

    id: uuid.UUID
    role: Role

    @classmethod
    def from_profile(cls, profile) -> "Actor":
        return cls(id=profile.id, role=Role(profile.role))


# ──────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────

def _now() -> datetime:
    return datetime.now(timezone.utc)


def _status(timesheet) -> TimesheetStatus:
    return TimesheetStatus(timesheet.status)


def _is_owner(actor: Actor, timesheet) -> bool:
    return actor.id == timesheet.employee_id


def parse_hours(value: Any) -> Decimal:
    """Coerce ``value`` to a Decimal in the half-open range (0, 24], at most two places."""
    if isinstance(value, bool):
        raise ValidationError("Hours worked must be a number")
    try:
        hours = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("Hours worked must be a number")
    if not hours.is_finite():
        raise ValidationError("Hours worked must be a number")
    if hours.normalize().as_tuple().exponent < -HOURS_PLACES:
        raise ValidationError(f"Hours worked allows at most {HOURS_PLACES} decimal places")
    if not (MIN_HOURS < hours <= MAX_HOURS):
        raise ValidationError("Hours worked must be greater than 0 and at most 24")
    return hours


def parse_day(value: Any) -> date:
    """Accept a date or an ISO ``YYYY-MM-DD`` string; datetimes lose their time."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"Invalid date: {value!r}. Expected YYYY-MM-DD")


def require_text(value: Optional[str], label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def require_active_project(project) -> None:
    if project is None:
        raise ValidationError("Project not found")
    if ProjectStatus(project.status) is not ProjectStatus.active:
        raise ValidationError("Timesheets can only be logged against active projects")


# ──────────────────────────────────────────────
# Mutations
# ──────────────────────────────────────────────

def create_timesheet(
    actor: Actor,
    project,
    day: Any,
    task: Optional[str],
    hours: Any,
    notes: Optional[str] = "",
) -> dict:
    """Return the row for a new draft timesheet owned by ``actor``."""
    if actor.role is not Role.employee:
        raise AuthorizationError("Only employees can log timesheets")
    require_active_project(project)
    return {
        "employee_id": actor.id,
        "project_id": project.id,
        "date": parse_day(day),
        "task_description": require_text(task, "Task description"),
        "hours_worked": parse_hours(hours),
        "notes": (notes or "").strip(),
        "status": TimesheetStatus.draft.value,
        "submitted_at": None,
        "reviewed_at": None,
        "reviewed_by": None,
    }


def update_timesheet(actor: Actor, timesheet, fields: dict, project=None) -> dict:
    """Validate an edit of a draft and return the normalized changes.

    ``project`` must be the target project when ``fields`` changes project_id.
    """
    if not _is_owner(actor, timesheet):
        raise AuthorizationError("You can only edit your own timesheets")
    if _status(timesheet) is not TimesheetStatus.draft:
        raise AuthorizationError("Only draft timesheets can be edited")

    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields not editable: {sorted(unknown)}")

    changes = {}
    for field, value in fields.items():
        if field == "project_id":
            if value != timesheet.project_id:
                require_active_project(project)
            changes["project_id"] = value
        elif field == "date":
            changes["date"] = parse_day(value)
        elif field == "task_description":
            changes["task_description"] = require_text(value, "Task description")
        elif field == "hours_worked":
            changes["hours_worked"] = parse_hours(value)
        elif field == "notes":
            changes["notes"] = (value or "").strip()
    return changes


def submit_timesheet(actor: Actor, timesheet, now: Optional[datetime] = None) -> dict:
    if not _is_owner(actor, timesheet):
        raise AuthorizationError("You can only submit your own timesheets")
    current = _status(timesheet)
    if current is not TimesheetStatus.draft:
        raise InvalidTransitionError(f"Cannot submit a {current.value} timesheet")
    return {
        "status": TimesheetStatus.submitted.value,
        "submitted_at": now or _now(),
    }


def _check_reviewer(actor: Actor, timesheet, owner_manager_id: Optional[uuid.UUID]) -> None:
    # admins are not reviewers; only the owner's assigned manager is
    if actor.role is not Role.manager or owner_manager_id is None or actor.id != owner_manager_id:
        raise AuthorizationError("Only the employee's assigned manager can review this timesheet")
    current = _status(timesheet)
    if current is not TimesheetStatus.submitted:
        raise InvalidTransitionError(f"Cannot review a {current.value} timesheet")


def approve_timesheet(
    actor: Actor,
    timesheet,
    owner_manager_id: Optional[uuid.UUID],
    now: Optional[datetime] = None,
) -> dict:
    _check_reviewer(actor, timesheet, owner_manager_id)
    return {
        "status": TimesheetStatus.approved.value,
        "reviewed_at": now or _now(),
        "reviewed_by": actor.id,
    }


def reject_timesheet(
    actor: Actor,
    timesheet,
    owner_manager_id: Optional[uuid.UUID],
    comment: Optional[str] = "",
    now: Optional[datetime] = None,
) -> tuple[dict, Optional[dict]]:
    """Return ``(changes, comment_row)``; comment_row is None for blank feedback."""
    _check_reviewer(actor, timesheet, owner_manager_id)
    changes = {
        "status": TimesheetStatus.rejected.value,
        "reviewed_at": now or _now(),
        "reviewed_by": actor.id,
    }
    text = (comment or "").strip()
    comment_row = None
    if text:
        comment_row = {
            "timesheet_id": timesheet.id,
            "commenter_id": actor.id,
            "comment": text,
        }
    return changes, comment_row


def check_delete(actor: Actor, timesheet) -> None:
    if not _is_owner(actor, timesheet):
        raise AuthorizationError("You can only delete your own timesheets")
    if _status(timesheet) is not TimesheetStatus.draft:
        raise AuthorizationError("Only draft timesheets can be deleted")


# ──────────────────────────────────────────────
# Visibility
# ──────────────────────────────────────────────

def can_view(actor: Actor, timesheet, owner_manager_id: Optional[uuid.UUID]) -> bool:
    if actor.role is Role.employee:
        return _is_owner(actor, timesheet)
    if actor.role is Role.manager:
        return owner_manager_id is not None and owner_manager_id == actor.id
    if actor.role is Role.admin:
        return True
    raise ValueError(f"Unhandled role: {actor.role!r}")
