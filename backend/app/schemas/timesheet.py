from pydantic import BaseModel, Field
from typing import Optional
import datetime as dt
from uuid import UUID
from decimal import Decimal

from app.models.timesheet import TimesheetStatus


class TimesheetCreate(BaseModel):
    project_id: UUID
    date: dt.date
    task_description: str
    hours_worked: Decimal
    notes: str = ""


class TimesheetUpdate(BaseModel):
    project_id: Optional[UUID] = None
    date: Optional[dt.date] = None
    task_description: Optional[str] = None
    hours_worked: Optional[Decimal] = None
    notes: Optional[str] = None


class RejectRequest(BaseModel):
    comment: str = ""


class TimesheetFilters(BaseModel):
    project_id: Optional[UUID] = None
    employee_id: Optional[UUID] = None
    status: Optional[TimesheetStatus] = None
    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None


class TimesheetCommentResponse(BaseModel):
    id: UUID
    timesheet_id: UUID
    commenter_id: UUID
    comment: str
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class TimesheetResponse(BaseModel):
    id: UUID
    employee_id: UUID
    project_id: UUID
    date: dt.date
    task_description: str
    hours_worked: float
    notes: str = ""
    status: TimesheetStatus
    submitted_at: Optional[dt.datetime] = None
    reviewed_at: Optional[dt.datetime] = None
    reviewed_by: Optional[UUID] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    comments: list[TimesheetCommentResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class RejectResponse(BaseModel):
    timesheet: TimesheetResponse
    comment: Optional[TimesheetCommentResponse] = None
    comment_error: Optional[str] = None
