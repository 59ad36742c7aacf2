from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceFilter, AttendanceRecord, AttendanceRow, AttendanceSummary, TeamMemberStatus


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> int:
        """Insert the day's record; raises ConflictError if one already exists."""

        raise NotImplementedError

    def fill_checkin(self, *, attendance_id: int, check_in_time: datetime, status: AttendanceStatus) -> bool:
        """Set check-in on an existing record only while it has none."""

        raise NotImplementedError

    def complete_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        total_hours: Decimal,
    ) -> bool:
        """Set check-out only while it is still empty; False if another call won."""

        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def summarize_for_user(self, user_id: int, *, start_date: date, end_date: date) -> AttendanceSummary:
        raise NotImplementedError

    def list_team_records(
        self,
        manager_id: int,
        *,
        filters: AttendanceFilter,
        user_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRow]:
        raise NotImplementedError

    def summarize_team(self, manager_id: int, *, start_date: date, end_date: date) -> tuple[int, AttendanceSummary]:
        """Distinct employees with records in the window, and their status counts."""

        raise NotImplementedError

    def team_status_for_date(self, manager_id: int, work_date: date) -> Sequence[TeamMemberStatus]:
        raise NotImplementedError
