from pydantic import BaseModel
from uuid import UUID


class ProjectHours(BaseModel):
    project_id: UUID
    name: str
    hours: float


class EmployeeHours(BaseModel):
    employee_id: UUID
    name: str
    hours: float


class AnalyticsResponse(BaseModel):
    hours_by_project: list[ProjectHours]
    hours_by_employee: list[EmployeeHours]
    status_counts: dict[str, int]
    total_hours: float
    entries: int


class AdminOverview(BaseModel):
    total_users: int
    employees: int
    managers: int
    total_projects: int
    active_projects: int
    total_timesheets: int
    pending_timesheets: int
    total_hours: float


class TeamOverview(BaseModel):
    team_size: int
    pending: int
    approved: int
    rejected: int
