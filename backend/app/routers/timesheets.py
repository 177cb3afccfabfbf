"""
Timesheets router.

Employees log and submit their own entries; managers review their reports'
submissions; admins see everything. Who may do what is decided by
app.services.lifecycle, so handlers here only translate HTTP to service calls.
"""

import logging
import uuid

from fastapi import APIRouter, Depends

from app.dependencies import get_actor, get_repo
from app.schemas.timesheet import (
    TimesheetCreate,
    TimesheetUpdate,
    TimesheetFilters,
    TimesheetResponse,
    TimesheetCommentResponse,
    RejectRequest,
    RejectResponse,
)
from app.services import timesheets as timesheet_service
from app.services.lifecycle import Actor
from app.services.repository import SqlRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/timesheets", tags=["Timesheets"])


def _out(ts, comments=()) -> TimesheetResponse:
    out = TimesheetResponse.model_validate(ts)
    out.comments = [TimesheetCommentResponse.model_validate(c) for c in comments]
    return out


# ── LIST / CREATE ──


@router.get("/", response_model=list[TimesheetResponse])
def list_timesheets(
    filters: TimesheetFilters = Depends(),
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    """Timesheets visible to the caller, newest first, with reviewer comments."""
    entries = timesheet_service.list_timesheets(
        repo, actor,
        project_id=filters.project_id,
        employee_id=filters.employee_id,
        status=filters.status,
        date_from=filters.date_from,
        date_to=filters.date_to,
    )
    comments = timesheet_service.comments_for(repo, entries)
    return [_out(e, comments[e.id]) for e in entries]


@router.post("/", response_model=TimesheetResponse, status_code=201)
def create_timesheet(
    body: TimesheetCreate,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    ts = timesheet_service.create_timesheet(
        repo, actor,
        project_id=body.project_id,
        day=body.date,
        task_description=body.task_description,
        hours_worked=body.hours_worked,
        notes=body.notes,
    )
    return _out(ts)


# ── GET / UPDATE / DELETE by ID ──


@router.get("/{timesheet_id}", response_model=TimesheetResponse)
def get_timesheet(
    timesheet_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    ts = timesheet_service.get_timesheet(repo, actor, timesheet_id)
    return _out(ts, timesheet_service.comments_for(repo, [ts])[ts.id])


@router.put("/{timesheet_id}", response_model=TimesheetResponse)
def update_timesheet(
    timesheet_id: uuid.UUID,
    body: TimesheetUpdate,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    ts = timesheet_service.update_timesheet(
        repo, actor, timesheet_id, body.model_dump(exclude_unset=True)
    )
    return _out(ts)


@router.delete("/{timesheet_id}")
def delete_timesheet(
    timesheet_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    timesheet_service.delete_timesheet(repo, actor, timesheet_id)
    return {"ok": True}


@router.get("/{timesheet_id}/comments", response_model=list[TimesheetCommentResponse])
def list_comments(
    timesheet_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    return timesheet_service.list_comments(repo, actor, timesheet_id)


# ── Transitions ──


@router.post("/{timesheet_id}/submit", response_model=TimesheetResponse)
def submit_timesheet(
    timesheet_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    return _out(timesheet_service.submit_timesheet(repo, actor, timesheet_id))


@router.post("/{timesheet_id}/approve", response_model=TimesheetResponse)
def approve_timesheet(
    timesheet_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    return _out(timesheet_service.approve_timesheet(repo, actor, timesheet_id))


@router.post("/{timesheet_id}/reject", response_model=RejectResponse)
def reject_timesheet(
    timesheet_id: uuid.UUID,
    body: RejectRequest,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    result = timesheet_service.reject_timesheet(repo, actor, timesheet_id, body.comment)
    comments = [result.comment] if result.comment is not None else []
    return RejectResponse(
        timesheet=_out(result.timesheet, comments),
        comment=TimesheetCommentResponse.model_validate(result.comment) if result.comment else None,
        comment_error=result.comment_error,
    )
