from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from werkzeug.security import generate_password_hash

from src.attendance_tracker.attendance_tracker.attendance.model import (
    AttendanceFilter,
    AttendanceRecord,
    AttendanceRow,
    AttendanceSummary,
    TeamMemberStatus,
)
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus, Role
from src.attendance_tracker.attendance_tracker.core.exceptions import ConflictError
from src.attendance_tracker.attendance_tracker.users.model import ManagerOption, User

PASSWORD = "secret123"
_PASSWORD_HASH = generate_password_hash(PASSWORD)


def make_user(user_id: int, role: Role, *, manager_id=None, name=None, department="Engineering") -> User:
    prefix = "MGR" if role == Role.MANAGER else "EMP"
    return User(
        user_id=user_id,
        full_name=name or f"User {user_id}",
        email=f"user{user_id}@example.com",
        password_hash=_PASSWORD_HASH,
        role=role,
        employee_code=f"{prefix}{user_id:03d}",
        department=department,
        manager_id=manager_id,
    )


class InMemoryUsers:
    def __init__(self, users: Optional[list[User]] = None):
        self.users_by_id: dict[int, User] = {u.user_id: u for u in users or []}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.email == email), None)

    def max_code_number(self, prefix: str) -> int:
        numbers = [
            int(u.employee_code[len(prefix):])
            for u in self.users_by_id.values()
            if u.employee_code.startswith(prefix) and u.employee_code[len(prefix):].isdigit()
        ]
        return max(numbers, default=0)

    def create_user(self, *, full_name, email, password_hash, role, employee_code, department, manager_id) -> int:
        user_id = max(self.users_by_id, default=0) + 1
        self.users_by_id[user_id] = User(
            user_id=user_id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            employee_code=employee_code,
            department=department,
            manager_id=manager_id,
        )
        return user_id

    def list_managers(self):
        return [
            ManagerOption(
                user_id=u.user_id,
                full_name=u.full_name,
                email=u.email,
                employee_code=u.employee_code,
                department=u.department,
            )
            for u in sorted(self.users_by_id.values(), key=lambda u: u.full_name)
            if u.role == Role.MANAGER
        ]


class InMemoryAttendance:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self.lose_checkout_race = False

    def add(self, record: AttendanceRecord) -> None:
        self._id = max(self._id, record.attendance_id)
        self._by_user_date[(record.user_id, record.work_date)] = record

    def _find(self, attendance_id: int):
        for key, rec in self._by_user_date.items():
            if rec.attendance_id == attendance_id:
                return key, rec
        return None, None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, work_date))

    def create_checkin(self, *, user_id: int, work_date: date, check_in_time: datetime, status: AttendanceStatus) -> int:
        if (user_id, work_date) in self._by_user_date:
            raise ConflictError("Already checked in today")
        self._id += 1
        self._by_user_date[(user_id, work_date)] = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=status,
        )
        return self._id

    def fill_checkin(self, *, attendance_id: int, check_in_time: datetime, status: AttendanceStatus) -> bool:
        key, rec = self._find(attendance_id)
        if rec is None or rec.check_in_time is not None:
            return False
        self._by_user_date[key] = replace(rec, check_in_time=check_in_time, status=status)
        return True

    def complete_checkout(self, *, attendance_id: int, check_out_time: datetime, status: AttendanceStatus, total_hours: Decimal) -> bool:
        if self.lose_checkout_race:
            return False
        key, rec = self._find(attendance_id)
        if rec is None or rec.check_in_time is None or rec.check_out_time is not None:
            return False
        self._by_user_date[key] = replace(rec, check_out_time=check_out_time, status=status, total_hours=total_hours)
        return True

    def list_for_user(self, user_id: int, *, start_date=None, end_date=None, limit=None):
        items = [
            r
            for r in self._by_user_date.values()
            if r.user_id == user_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit] if limit is not None else items

    @staticmethod
    def _summarize(records) -> AttendanceSummary:
        statuses = [r.status for r in records]
        return AttendanceSummary(
            present=statuses.count(AttendanceStatus.PRESENT),
            absent=statuses.count(AttendanceStatus.ABSENT),
            late=statuses.count(AttendanceStatus.LATE),
            half_day=statuses.count(AttendanceStatus.HALF_DAY),
            total_hours=sum((r.total_hours or Decimal("0") for r in records), Decimal("0.00")),
        )

    def summarize_for_user(self, user_id: int, *, start_date: date, end_date: date) -> AttendanceSummary:
        return self._summarize(self.list_for_user(user_id, start_date=start_date, end_date=end_date))

    def list_team_records(self, manager_id: int, *, filters: AttendanceFilter, user_id=None, limit=None):
        rows = []
        for rec in self._by_user_date.values():
            owner = self._users.get_by_id(rec.user_id)
            if owner is None or owner.manager_id != manager_id:
                continue
            if user_id is not None and owner.user_id != user_id:
                continue
            if filters.employee_code and owner.employee_code != filters.employee_code:
                continue
            if filters.work_date and rec.work_date != filters.work_date:
                continue
            if filters.has_range and not (filters.start_date <= rec.work_date <= filters.end_date):
                continue
            if filters.status and rec.status != filters.status:
                continue
            rows.append(
                AttendanceRow(
                    record=rec,
                    full_name=owner.full_name,
                    email=owner.email,
                    employee_code=owner.employee_code,
                    department=owner.department,
                )
            )
        rows.sort(key=lambda r: r.full_name)
        rows.sort(key=lambda r: r.record.work_date, reverse=True)
        return rows[:limit] if limit is not None else rows

    def summarize_team(self, manager_id: int, *, start_date: date, end_date: date):
        rows = self.list_team_records(manager_id, filters=AttendanceFilter(start_date=start_date, end_date=end_date))
        records = [r.record for r in rows]
        return len({r.user_id for r in records}), self._summarize(records)

    def team_status_for_date(self, manager_id: int, work_date: date):
        out = []
        for u in sorted(self._users.users_by_id.values(), key=lambda u: u.full_name):
            if u.role != Role.EMPLOYEE or u.manager_id != manager_id:
                continue
            rec = self._by_user_date.get((u.user_id, work_date))
            out.append(
                TeamMemberStatus(
                    user_id=u.user_id,
                    full_name=u.full_name,
                    email=u.email,
                    employee_code=u.employee_code,
                    department=u.department,
                    check_in_time=rec.check_in_time if rec else None,
                    check_out_time=rec.check_out_time if rec else None,
                    status=rec.status if rec else AttendanceStatus.ABSENT,
                )
            )
        return out
