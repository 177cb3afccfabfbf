"""
User administration: profiles and their backing login identities.

A user is two rows, the identity (credentials) and the profile (name, role,
manager). Creation writes the identity first and removes it again if the
profile insert fails. Deletion removes the identity and the database cascades
it to the profile.
"""

import logging
import uuid
from typing import Optional

from app.errors import AuthorizationError, CollaboratorError, NotFoundError, ValidationError
from app.models.profile import AuthIdentity, Profile, Role
from app.models.timesheet import Timesheet, TimesheetComment
from app.services.audit import log_action
from app.services.lifecycle import Actor, require_text
from app.services.repository import SqlRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _require_admin(actor: Actor) -> None:
    if actor.role is not Role.admin:
        raise AuthorizationError("Admin access required")


def _parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(f"Invalid role. Must be one of: {[r.value for r in Role]}")


def validate_manager_ref(
    repo: SqlRepository,
    role: Role,
    manager_id: Optional[uuid.UUID],
    profile_id: Optional[uuid.UUID] = None,
) -> Optional[uuid.UUID]:
    """A manager reference must point at another profile with role manager, and only applies to employees."""
    if manager_id is None:
        return None
    if role is not Role.employee:
        raise ValidationError("Only employees can be assigned a manager")
    if profile_id is not None and manager_id == profile_id:
        raise ValidationError("A user cannot be their own manager")
    manager = repo.get(Profile, manager_id)
    if manager is None or Role(manager.role) is not Role.manager:
        raise ValidationError("Assigned manager must be a profile with role 'manager'")
    return manager_id


def list_users(repo: SqlRepository, actor: Actor) -> list[Profile]:
    _require_admin(actor)
    return repo.select(Profile, order_by=("-created_at",))


def list_managers(repo: SqlRepository, actor: Actor) -> list[Profile]:
    _require_admin(actor)
    return repo.select(Profile, {"role": Role.manager.value}, order_by=("full_name",))


def get_profile(repo: SqlRepository, profile_id: uuid.UUID) -> Profile:
    profile = repo.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError("User not found")
    return profile


def create_user(
    repo: SqlRepository,
    actor: Actor,
    email: str,
    password: str,
    full_name: str,
    role="employee",
    manager_id: Optional[uuid.UUID] = None,
) -> Profile:
    _require_admin(actor)
    email = require_text(email, "Email").lower()
    full_name = require_text(full_name, "Full name")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    role = _parse_role(role)
    manager_id = validate_manager_ref(repo, role, manager_id)
    if repo.select(AuthIdentity, {"email": email}):
        raise ValidationError("A user with this email already exists")

    identity_id = repo.create_identity(email, password)
    try:
        profile = repo.insert(Profile, {
            "id": identity_id,
            "email": email,
            "full_name": full_name,
            "role": role.value,
            "manager_id": manager_id,
        })
    except CollaboratorError:
        logger.error("Profile insert failed for %s; removing identity %s", email, identity_id)
        repo.delete_identity(identity_id)
        raise

    logger.info("User %s (%s) created by %s", profile.id, role.value, actor.id)
    log_action(repo.db, actor.id, "user.create", "profile", profile.id, details={"role": role.value})
    return profile


def update_user(repo: SqlRepository, actor: Actor, profile_id: uuid.UUID, fields: dict) -> Profile:
    """Admin edit of full_name, role and manager_id."""
    _require_admin(actor)
    profile = get_profile(repo, profile_id)

    changes = {}
    if "full_name" in fields:
        changes["full_name"] = require_text(fields["full_name"], "Full name")
    role = _parse_role(fields["role"]) if "role" in fields else Role(profile.role)
    if "role" in fields:
        changes["role"] = role.value

    if "manager_id" in fields:
        changes["manager_id"] = validate_manager_ref(repo, role, fields["manager_id"], profile.id)
    elif role is not Role.employee and profile.manager_id is not None:
        # promoted out of employee: the reporting line no longer applies
        changes["manager_id"] = None

    if Role(profile.role) is Role.manager and role is not Role.manager:
        if repo.select(Profile, {"manager_id": profile.id}):
            raise ValidationError("Reassign this manager's reports before changing their role")

    if not changes:
        return profile
    profile = repo.update(Profile, profile.id, changes)
    logger.info("User %s updated by %s: %s", profile.id, actor.id, sorted(changes))
    log_action(repo.db, actor.id, "user.update", "profile", profile.id, details=changes)
    return profile


def delete_user(repo: SqlRepository, actor: Actor, profile_id: uuid.UUID) -> None:
    """Remove a user by deleting their identity.

    The profile goes with it (ON DELETE CASCADE) and any reports have their
    manager_id cleared (ON DELETE SET NULL), all in one statement. Users who
    own or reviewed timesheets are refused before anything is written.
    """
    _require_admin(actor)
    if profile_id == actor.id:
        raise ValidationError("You cannot delete your own account")
    profile = get_profile(repo, profile_id)

    if repo.select(Timesheet, {"employee_id": profile.id}):
        raise ValidationError("User has logged timesheets and cannot be deleted")
    if repo.select(Timesheet, {"reviewed_by": profile.id}):
        raise ValidationError("User has reviewed timesheets and cannot be deleted")
    if repo.select(TimesheetComment, {"commenter_id": profile.id}):
        raise ValidationError("User has commented on timesheets and cannot be deleted")

    repo.delete_identity(profile_id)
    logger.info("User %s deleted by %s", profile_id, actor.id)
    log_action(repo.db, actor.id, "user.delete", "profile", profile_id)
