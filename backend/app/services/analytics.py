"""
Read-only timesheet aggregations for the admin analytics view and dashboards.

All functions are pure and never raise on well-formed rows. Hour totals only
count approved entries and are carried as Decimal at full precision; status
counts cover every entry.

Note the deliberate asymmetry: hour breakdowns drop zero totals, while
status_counts always reports all four statuses.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from app.models.profile import Role
from app.models.project import ProjectStatus
from app.models.timesheet import TimesheetStatus


def _hours(t) -> Decimal:
    h = t.hours_worked
    return h if isinstance(h, Decimal) else Decimal(str(h))


def _day_key(value: Any) -> str:
    # ISO dates are fixed width and zero padded, so string order is date order
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def _is_approved(t) -> bool:
    return t.status == TimesheetStatus.approved.value


def filter_timesheets(
    timesheets: Iterable,
    project_id=None,
    employee_id=None,
    status: Optional[str] = None,
    date_from: Any = None,
    date_to: Any = None,
) -> list:
    """Keep entries matching every supplied predicate, in input order."""
    status_value = status.value if isinstance(status, TimesheetStatus) else status
    lo = _day_key(date_from) if date_from else None
    hi = _day_key(date_to) if date_to else None

    result = []
    for t in timesheets:
        if project_id is not None and t.project_id != project_id:
            continue
        if employee_id is not None and t.employee_id != employee_id:
            continue
        if status_value is not None and t.status != status_value:
            continue
        day = _day_key(t.date)
        if lo is not None and day < lo:
            continue
        if hi is not None and day > hi:
            continue
        result.append(t)
    return result


def total_approved_hours(timesheets: Iterable) -> Decimal:
    return sum((_hours(t) for t in timesheets if _is_approved(t)), Decimal("0"))


def _approved_totals(timesheets: Iterable, key: str) -> dict:
    totals = {}
    for t in timesheets:
        if _is_approved(t):
            k = getattr(t, key)
            totals[k] = totals.get(k, Decimal("0")) + _hours(t)
    return totals


def hours_by_project(timesheets: Iterable, projects: Iterable) -> list[dict]:
    """Approved hours per project, in ``projects`` order, zero totals omitted."""
    totals = _approved_totals(timesheets, "project_id")
    rows = []
    for p in projects:
        hours = totals.get(p.id, Decimal("0"))
        if hours > 0:
            rows.append({"project_id": p.id, "name": p.name, "hours": hours})
    return rows


def hours_by_employee(timesheets: Iterable, employees: Iterable) -> list[dict]:
    """Approved hours per employee-role profile, in ``employees`` order, zero totals omitted."""
    totals = _approved_totals(timesheets, "employee_id")
    rows = []
    for e in employees:
        if Role(e.role) is not Role.employee:
            continue
        hours = totals.get(e.id, Decimal("0"))
        if hours > 0:
            rows.append({"employee_id": e.id, "name": e.full_name, "hours": hours})
    return rows


def status_counts(timesheets: Iterable) -> dict[str, int]:
    counts = {s.value: 0 for s in TimesheetStatus}
    for t in timesheets:
        counts[TimesheetStatus(t.status).value] += 1
    return counts


def summarize(timesheets: list, projects: list, profiles: list) -> dict:
    """Everything the analytics view shows for an already-filtered collection."""
    return {
        "hours_by_project": hours_by_project(timesheets, projects),
        "hours_by_employee": hours_by_employee(timesheets, profiles),
        "status_counts": status_counts(timesheets),
        "total_hours": total_approved_hours(timesheets),
        "entries": len(timesheets),
    }


# ──────────────────────────────────────────────
# Dashboard cards
# ──────────────────────────────────────────────

def admin_overview(profiles: list, projects: list, timesheets: list) -> dict:
    return {
        "total_users": len(profiles),
        "employees": len([p for p in profiles if p.role == Role.employee.value]),
        "managers": len([p for p in profiles if p.role == Role.manager.value]),
        "total_projects": len(projects),
        "active_projects": len([p for p in projects if p.status == ProjectStatus.active.value]),
        "total_timesheets": len(timesheets),
        "pending_timesheets": len([t for t in timesheets if t.status == TimesheetStatus.submitted.value]),
        "total_hours": total_approved_hours(timesheets),
    }


def team_overview(timesheets: list) -> dict:
    counts = status_counts(timesheets)
    return {
        "pending": counts[TimesheetStatus.submitted.value],
        "approved": counts[TimesheetStatus.approved.value],
        "rejected": counts[TimesheetStatus.rejected.value],
    }
