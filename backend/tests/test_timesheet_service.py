"""
Test Timesheet Service

Service-level tests against an in-memory database:
- The employee/manager reject example end to end
- Visibility of list/get per role
- Best-effort comment attachment on reject
- Failed operations leave stored state unchanged
"""

import uuid
from decimal import Decimal

import pytest

from app.errors import (
    AuthorizationError,
    CollaboratorError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.models.audit_log import AuditLog
from app.models.timesheet import Timesheet, TimesheetComment
from app.services import timesheets as service
from app.services.repository import SqlRepository


class CommentlessRepository(SqlRepository):
    """Repository whose comment inserts always fail"""

    def insert(self, model, row):
        if model is TimesheetComment:
            raise CollaboratorError("insert timesheet_comments failed: OperationalError")
        return super().insert(model, row)


@pytest.fixture
def draft(repo, actors, projects):
    return service.create_timesheet(
        repo, actors.employee, projects.active.id, "2024-03-01", "Quarterly report", 8
    )


def test_reject_example(repo, actors, draft):
    """Test E submits, M rejects with feedback, a foreign manager is refused"""
    assert draft.status == "draft"
    assert float(draft.hours_worked) == 8

    submitted = service.submit_timesheet(repo, actors.employee, draft.id)
    assert submitted.status == "submitted"
    assert submitted.submitted_at is not None

    result = service.reject_timesheet(repo, actors.manager, draft.id, "missing project code")
    assert result.timesheet.status == "rejected"
    assert result.timesheet.reviewed_by == actors.manager.id
    assert result.comment_error is None

    comments = repo.select(TimesheetComment, {"timesheet_id": draft.id})
    assert len(comments) == 1
    assert comments[0].comment == "missing project code"
    assert comments[0].commenter_id == actors.manager.id

    with pytest.raises(AuthorizationError):
        service.approve_timesheet(repo, actors.manager2, draft.id)


def test_approve_flow(repo, actors, draft):
    service.submit_timesheet(repo, actors.employee, draft.id)
    approved = service.approve_timesheet(repo, actors.manager, draft.id)
    assert approved.status == "approved"
    assert approved.reviewed_by == actors.manager.id
    assert approved.reviewed_at is not None

    with pytest.raises(InvalidTransitionError):
        service.reject_timesheet(repo, actors.manager, draft.id, "too late")

    actions = [a.action for a in repo.select(AuditLog)]
    assert "timesheet.submit" in actions
    assert "timesheet.approve" in actions


def test_admin_cannot_review(repo, actors, draft):
    service.submit_timesheet(repo, actors.employee, draft.id)
    with pytest.raises(AuthorizationError):
        service.approve_timesheet(repo, actors.admin, draft.id)
    assert repo.get(Timesheet, draft.id).status == "submitted"


def test_reject_without_comment_stores_none(repo, actors, draft):
    service.submit_timesheet(repo, actors.employee, draft.id)
    result = service.reject_timesheet(repo, actors.manager, draft.id, "")
    assert result.timesheet.status == "rejected"
    assert result.comment is None
    assert repo.select(TimesheetComment) == []


def test_reject_keeps_status_when_comment_fails(db, actors, draft):
    """Test the rejection stands and the lost comment is reported"""
    repo = CommentlessRepository(db)
    service.submit_timesheet(repo, actors.employee, draft.id)

    result = service.reject_timesheet(repo, actors.manager, draft.id, "wrong project")
    assert result.comment is None
    assert "timesheet_comments" in result.comment_error

    stored = repo.get(Timesheet, draft.id)
    assert stored.status == "rejected"
    assert stored.reviewed_by == actors.manager.id
    assert repo.select(TimesheetComment) == []


def test_create_validation(repo, actors, projects):
    with pytest.raises(ValidationError):
        service.create_timesheet(repo, actors.employee, projects.active.id, "2024-03-01", "Work", 25)
    with pytest.raises(ValidationError):
        service.create_timesheet(repo, actors.employee, projects.active.id, "2024-03-01", "Work", 0)
    with pytest.raises(ValidationError):
        service.create_timesheet(repo, actors.employee, projects.inactive.id, "2024-03-01", "Work", 8)
    with pytest.raises(ValidationError):
        service.create_timesheet(repo, actors.employee, "not-a-uuid", "2024-03-01", "Work", 8)

    ok = service.create_timesheet(repo, actors.employee, projects.active.id, "2024-03-01", "Work", 24)
    assert float(ok.hours_worked) == 24
    assert len(repo.select(Timesheet)) == 1


def test_update_only_while_draft(repo, actors, draft, projects):
    updated = service.update_timesheet(repo, actors.employee, draft.id, {"hours_worked": 7.5, "notes": "wfh"})
    assert float(updated.hours_worked) == 7.5
    assert updated.notes == "wfh"

    with pytest.raises(ValidationError):
        service.update_timesheet(repo, actors.employee, draft.id, {"project_id": projects.inactive.id})

    service.submit_timesheet(repo, actors.employee, draft.id)
    with pytest.raises(AuthorizationError):
        service.update_timesheet(repo, actors.employee, draft.id, {"notes": "changed"})
    assert repo.get(Timesheet, draft.id).notes == "wfh"


def test_delete_only_draft(repo, actors, draft, projects):
    with pytest.raises(AuthorizationError):
        service.delete_timesheet(repo, actors.employee2, draft.id)

    service.delete_timesheet(repo, actors.employee, draft.id)
    assert repo.get(Timesheet, draft.id) is None

    other = service.create_timesheet(repo, actors.employee, projects.active.id, "2024-03-02", "Work", 3)
    service.submit_timesheet(repo, actors.employee, other.id)
    with pytest.raises(AuthorizationError):
        service.delete_timesheet(repo, actors.employee, other.id)


def test_missing_timesheet(repo, actors):
    with pytest.raises(NotFoundError):
        service.submit_timesheet(repo, actors.employee, uuid.uuid4())


def test_visibility_of_lists(repo, actors, projects):
    mine = service.create_timesheet(repo, actors.employee, projects.active.id, "2024-03-01", "A", 1)
    theirs = service.create_timesheet(repo, actors.employee2, projects.active.id, "2024-03-02", "B", 2)

    assert [t.id for t in service.list_timesheets(repo, actors.employee)] == [mine.id]
    assert [t.id for t in service.list_timesheets(repo, actors.manager)] == [mine.id]
    assert [t.id for t in service.list_timesheets(repo, actors.manager2)] == [theirs.id]
    assert {t.id for t in service.list_timesheets(repo, actors.admin)} == {mine.id, theirs.id}

    # newest date first
    assert [t.id for t in service.list_timesheets(repo, actors.admin)] == [theirs.id, mine.id]

    with pytest.raises(NotFoundError):
        service.get_timesheet(repo, actors.employee, theirs.id)
    with pytest.raises(NotFoundError):
        service.list_comments(repo, actors.manager, theirs.id)
    assert service.get_timesheet(repo, actors.manager2, theirs.id).id == theirs.id


def test_list_filters(repo, actors, projects):
    service.create_timesheet(repo, actors.employee, projects.active.id, "2024-03-01", "A", 1)
    second = service.create_timesheet(repo, actors.employee, projects.active.id, "2024-03-10", "B", 2)
    service.submit_timesheet(repo, actors.employee, second.id)

    assert [t.id for t in service.list_timesheets(repo, actors.employee, status="submitted")] == [second.id]
    assert [t.id for t in service.list_timesheets(repo, actors.employee, date_from="2024-03-05")] == [second.id]
    assert service.list_timesheets(repo, actors.employee, date_to="2024-02-28") == []


@pytest.mark.parametrize("hours", ["0.04", "7.25", "24"])
def test_hours_stored_without_rounding(repo, actors, projects, hours):
    """Test accepted hours read back from the database unchanged"""
    ts = service.create_timesheet(repo, actors.employee, projects.active.id, "2024-03-01", "Work", hours)
    repo.db.expire_all()
    assert repo.get(Timesheet, ts.id).hours_worked == Decimal(hours)


def test_hours_beyond_two_places_refused(repo, actors, projects):
    with pytest.raises(ValidationError):
        service.create_timesheet(repo, actors.employee, projects.active.id, "2024-03-01", "Work", "0.004")
    assert repo.select(Timesheet) == []
