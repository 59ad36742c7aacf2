from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from ..attendance.model import AttendanceFilter, AttendanceRecord, AttendanceSummary, TeamMemberStatus, TodayStatus
from ..attendance.service import AttendanceService
from ..common.datetime_utils import month_bounds, now_local
from ..core.constants import RECENT_DAYS
from ..core.enums import AttendanceStatus

AT_WORK = (AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY)


@dataclass(frozen=True)
class EmployeeDashboard:
    today: TodayStatus
    monthly: AttendanceSummary
    recent: list[AttendanceRecord]

    def to_dict(self) -> dict:
        return {
            "today": self.today.to_dict(),
            "monthly": self.monthly.to_dict(),
            "recent": [r.to_dict() for r in self.recent],
        }


@dataclass(frozen=True)
class ManagerDashboard:
    total_employees: int
    present_today: int
    absent_today: int
    late_today: int
    weekly_trend: list[dict] = field(default_factory=list)
    department_wise: list[dict] = field(default_factory=list)
    absent_employees: list[TeamMemberStatus] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_employees": self.total_employees,
            "today": {
                "present": self.present_today,
                "absent": self.absent_today,
                "late": self.late_today,
            },
            "weekly_trend": self.weekly_trend,
            "department_wise": self.department_wise,
            "absent_today": [
                {
                    "id": m.user_id,
                    "name": m.full_name,
                    "email": m.email,
                    "employee_id": m.employee_code,
                    "department": m.department,
                }
                for m in self.absent_employees
            ],
        }


class DashboardService:
    """Aggregates for the employee and manager landing pages."""

    def __init__(self, attendance: AttendanceService):
        self._attendance = attendance

    def employee_dashboard(self, user_id: int, *, today: Optional[date] = None) -> EmployeeDashboard:
        today = today or now_local().date()
        return EmployeeDashboard(
            today=self._attendance.get_today(user_id, today=today),
            monthly=self._attendance.get_monthly_summary(user_id, year=today.year, month=today.month),
            recent=list(
                self._attendance.get_recent(user_id, since=today - timedelta(days=RECENT_DAYS), until=today)
            ),
        )

    def manager_dashboard(self, manager_id: int, *, today: Optional[date] = None) -> ManagerDashboard:
        today = today or now_local().date()
        team = list(self._attendance.get_team_status(manager_id, today=today))

        present = [m for m in team if m.status in AT_WORK]
        absent = [m for m in team if m.status not in AT_WORK]
        late = [m for m in team if m.status == AttendanceStatus.LATE]

        return ManagerDashboard(
            total_employees=len(team),
            present_today=len(present),
            absent_today=len(absent),
            late_today=len(late),
            weekly_trend=self._weekly_trend(manager_id, today=today),
            department_wise=self._department_wise(manager_id, team, today=today),
            absent_employees=absent,
        )

    def _weekly_trend(self, manager_id: int, *, today: date) -> list[dict]:
        since = today - timedelta(days=RECENT_DAYS)
        rows = self._attendance.list_team_records(
            manager_id, filters=AttendanceFilter(start_date=since, end_date=today), limit=None
        )

        by_day: dict[date, dict] = {}
        for row in rows:
            day = row.record.work_date
            bucket = by_day.setdefault(day, {"date": day.isoformat(), "present": 0, "absent": 0})
            if row.record.status in AT_WORK:
                bucket["present"] += 1
            elif row.record.status == AttendanceStatus.ABSENT:
                bucket["absent"] += 1
        return [by_day[d] for d in sorted(by_day)]

    def _department_wise(self, manager_id: int, team: list[TeamMemberStatus], *, today: date) -> list[dict]:
        start, end = month_bounds(today.year, today.month)
        rows = self._attendance.list_team_records(
            manager_id, filters=AttendanceFilter(start_date=start, end_date=end), limit=None
        )

        departments: "OrderedDict[str, dict]" = OrderedDict()
        for member in sorted(team, key=lambda m: m.department or ""):
            name = member.department or "Unassigned"
            dept = departments.setdefault(name, {"department": name, "employees": 0, "present": 0, "absent": 0})
            dept["employees"] += 1

        for row in rows:
            name = row.department or "Unassigned"
            dept = departments.setdefault(name, {"department": name, "employees": 0, "present": 0, "absent": 0})
            if row.record.status in AT_WORK:
                dept["present"] += 1
            elif row.record.status == AttendanceStatus.ABSENT:
                dept["absent"] += 1
        return list(departments.values())
