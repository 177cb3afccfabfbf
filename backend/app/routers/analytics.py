"""
Admin analytics and the manager team view.

Both load the relevant rows once and aggregate in process with
app.services.analytics.
"""

from fastapi import APIRouter, Depends

from app.dependencies import get_repo, require_admin, require_manager
from app.models.profile import Profile, Role
from app.models.project import Project
from app.models.timesheet import Timesheet
from app.schemas.analytics import AnalyticsResponse, AdminOverview, TeamOverview
from app.schemas.profile import ProfileResponse
from app.schemas.timesheet import TimesheetFilters
from app.services import analytics
from app.services import timesheets as timesheet_service
from app.services.lifecycle import Actor
from app.services.repository import SqlRepository

router = APIRouter(prefix="/api/v1/analytics", tags=["Analytics"])
team_router = APIRouter(prefix="/api/v1/team", tags=["Team"])


# ── ADMIN ──

@router.get("/", response_model=AnalyticsResponse)
def analytics_view(
    filters: TimesheetFilters = Depends(),
    actor: Actor = Depends(require_admin),
    repo: SqlRepository = Depends(get_repo),
):
    """Approved-hour breakdowns and status counts over the filtered timesheets."""
    entries = analytics.filter_timesheets(
        repo.select(Timesheet, order_by=timesheet_service.DEFAULT_ORDER),
        project_id=filters.project_id,
        employee_id=filters.employee_id,
        status=filters.status,
        date_from=filters.date_from,
        date_to=filters.date_to,
    )
    projects = repo.select(Project, order_by=("name",))
    profiles = repo.select(Profile, order_by=("full_name",))
    return analytics.summarize(entries, projects, profiles)


@router.get("/overview", response_model=AdminOverview)
def admin_overview(
    actor: Actor = Depends(require_admin),
    repo: SqlRepository = Depends(get_repo),
):
    return analytics.admin_overview(
        repo.select(Profile),
        repo.select(Project),
        repo.select(Timesheet),
    )


# ── MANAGER ──

@team_router.get("/members", response_model=list[ProfileResponse])
def team_members(
    actor: Actor = Depends(require_manager),
    repo: SqlRepository = Depends(get_repo),
):
    """Employees whose manager_id is the caller."""
    return repo.select(
        Profile,
        {"manager_id": actor.id, "role": Role.employee.value},
        order_by=("full_name",),
    )


@team_router.get("/overview", response_model=TeamOverview)
def team_overview(
    actor: Actor = Depends(require_manager),
    repo: SqlRepository = Depends(get_repo),
):
    entries = timesheet_service.visible_timesheets(repo, actor)
    return {
        "team_size": len(timesheet_service.team_member_ids(repo, actor.id)),
        **analytics.team_overview(entries),
    }
