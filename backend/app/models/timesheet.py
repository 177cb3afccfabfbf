import enum
import uuid

from sqlalchemy import Column, String, Text, DateTime, Date, Numeric, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.sql import func

from app.database import Base


class TimesheetStatus(str, enum.Enum):
    draft = "draft"
    submitted = "submitted"
    approved = "approved"
    rejected = "rejected"


class Timesheet(Base):
    __tablename__ = "timesheets"
    __table_args__ = (
        CheckConstraint("hours_worked > 0 AND hours_worked <= 24", name="ck_timesheets_hours_range"),
        CheckConstraint("(reviewed_by IS NULL) = (reviewed_at IS NULL)", name="ck_timesheets_review_pair"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    task_description = Column(Text, nullable=False)
    hours_worked = Column(Numeric(5, 2), nullable=False)
    notes = Column(Text, nullable=False, default="")
    status = Column(String(20), nullable=False, default=TimesheetStatus.draft.value)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class TimesheetComment(Base):
    __tablename__ = "timesheet_comments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    timesheet_id = Column(Uuid(as_uuid=True), ForeignKey("timesheets.id", ondelete="CASCADE"), nullable=False, index=True)
    commenter_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
