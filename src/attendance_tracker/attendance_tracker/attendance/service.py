from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local, parse_optional_date
from ..core.constants import MY_HISTORY_LIMIT, TEAM_RECORDS_LIMIT
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..users.model import User
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import (
    AttendanceFilter,
    AttendanceRecord,
    AttendanceRow,
    AttendanceSummary,
    TeamMemberStatus,
    TeamSummary,
    TodayStatus,
)
from .repository import AttendanceRepository

logger = get_logger(__name__)

OUT_OF_SCOPE_MESSAGE = "Employee not found or not under your management"


def build_filter(
    *,
    employee_code: Optional[str] = None,
    work_date: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> AttendanceFilter:
    """Validate raw query-string filters."""

    status_e = None
    if status:
        try:
            status_e = AttendanceStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid status: {status!r}")

    start = parse_optional_date(start_date)
    end = parse_optional_date(end_date)
    if start and end and start > end:
        raise ValidationError("start_date must not be after end_date")

    return AttendanceFilter(
        employee_code=(employee_code or "").strip() or None,
        work_date=parse_optional_date(work_date),
        status=status_e,
        start_date=start,
        end_date=end,
    )


class AttendanceService:
    """Check-in/check-out lifecycle and the attendance read models.

    Employees only ever touch their own records. Managers only read records
    of users whose ``manager_id`` is their own id.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def _require_employee(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can record attendance")
        return user

    def check_in(self, user_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        self._require_employee(user_id)

        existing = self._attendance.get_for_user_and_date(user_id, today)
        if existing and existing.is_checked_in:
            raise ConflictError("Already checked in today")

        decision = self._factory.for_check_in(now).decide_checkin(check_in=now)

        if existing:
            if not self._attendance.fill_checkin(
                attendance_id=existing.attendance_id, check_in_time=now, status=decision.status
            ):
                raise ConflictError("Already checked in today")
        else:
            self._attendance.create_checkin(
                user_id=user_id,
                work_date=today,
                check_in_time=now,
                status=decision.status,
            )

        logger.info("User %s checked in at %s (%s)", user_id, now.isoformat(), decision.status.value)
        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def check_out(self, user_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record or not record.is_checked_in:
            raise ConflictError("Please check in first")
        if record.is_checked_out:
            raise ConflictError("Already checked out today")

        decision = self._factory.for_check_in(record.check_in_time).decide_checkout(
            check_in=record.check_in_time, check_out=now
        )

        # Only one concurrent check-out can flip check_out_time from NULL.
        if not self._attendance.complete_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            status=decision.status,
            total_hours=decision.total_hours,
        ):
            raise ConflictError("Already checked out today")

        logger.info(
            "User %s checked out at %s (%s, %s h)",
            user_id,
            now.isoformat(),
            decision.status.value,
            decision.total_hours,
        )
        return record.with_checkout(check_out_time=now, status=decision.status, total_hours=decision.total_hours)

    def get_today(self, user_id: int, *, today: date | None = None) -> TodayStatus:
        today = today or now_local().date()
        return TodayStatus.from_record(self._attendance.get_for_user_and_date(user_id, today))

    def get_history(
        self,
        user_id: int,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        limit: int = MY_HISTORY_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        start = end = None
        if year is not None and month is not None:
            start, end = month_bounds(year, month)
        return self._attendance.list_for_user(user_id, start_date=start, end_date=end, limit=limit)

    def get_recent(self, user_id: int, *, since: date, until: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user(user_id, start_date=since, end_date=until)

    def get_monthly_summary(self, user_id: int, *, year: int, month: int) -> AttendanceSummary:
        start, end = month_bounds(year, month)
        return self._attendance.summarize_for_user(user_id, start_date=start, end_date=end)

    # Manager views

    def require_managed_employee(self, *, manager_id: int, employee_id: int) -> User:
        employee = self._users.get_by_id(employee_id)
        if not employee or employee.manager_id != manager_id:
            raise AuthorizationError(OUT_OF_SCOPE_MESSAGE)
        return employee

    def list_team_records(
        self,
        manager_id: int,
        *,
        filters: AttendanceFilter | None = None,
        limit: Optional[int] = TEAM_RECORDS_LIMIT,
    ) -> Sequence[AttendanceRow]:
        return self._attendance.list_team_records(manager_id, filters=filters or AttendanceFilter(), limit=limit)

    def list_employee_records(
        self,
        manager_id: int,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRow]:
        self.require_managed_employee(manager_id=manager_id, employee_id=employee_id)
        filters = AttendanceFilter(start_date=start_date, end_date=end_date)
        return self._attendance.list_team_records(manager_id, filters=filters, user_id=employee_id)

    def get_team_summary(self, manager_id: int, *, year: int, month: int) -> TeamSummary:
        start, end = month_bounds(year, month)
        total, counts = self._attendance.summarize_team(manager_id, start_date=start, end_date=end)
        return TeamSummary(total_employees=total, counts=counts)

    def get_team_status(self, manager_id: int, *, today: date | None = None) -> Sequence[TeamMemberStatus]:
        today = today or now_local().date()
        return self._attendance.team_status_for_date(manager_id, today)
