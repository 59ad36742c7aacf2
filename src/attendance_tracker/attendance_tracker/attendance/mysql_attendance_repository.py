from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ConflictError, StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceFilter, AttendanceRecord, AttendanceRow, AttendanceSummary, TeamMemberStatus
from .repository import AttendanceRepository
from .status import determine_status

_RECORD_COLUMNS = """
    ar.attendance_id, ar.user_id, ar.work_date, ar.check_in_time, ar.check_out_time,
    ar.status, ar.total_hours, ar.created_at
"""

_SUMMARY_COLUMNS = """
    COALESCE(SUM(CASE WHEN ar.status = 'present' THEN 1 ELSE 0 END), 0) AS present,
    COALESCE(SUM(CASE WHEN ar.status = 'absent' THEN 1 ELSE 0 END), 0) AS absent,
    COALESCE(SUM(CASE WHEN ar.status = 'late' THEN 1 ELSE 0 END), 0) AS late,
    COALESCE(SUM(CASE WHEN ar.status = 'half-day' THEN 1 ELSE 0 END), 0) AS half_day,
    COALESCE(SUM(ar.total_hours), 0) AS total_hours
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        total_hours=Decimal(str(r["total_hours"])) if r.get("total_hours") is not None else None,
        created_at=r.get("created_at"),
    )


def _to_row(r: dict) -> AttendanceRow:
    return AttendanceRow(
        record=_to_record(r),
        full_name=r["full_name"],
        email=r["email"],
        employee_code=r["employee_code"],
        department=r.get("department"),
    )


def _to_summary(r: Optional[dict]) -> AttendanceSummary:
    if not r:
        return AttendanceSummary()
    return AttendanceSummary(
        present=int(r["present"]),
        absent=int(r["absent"]),
        late=int(r["late"]),
        half_day=int(r["half_day"]),
        total_hours=Decimal(str(r["total_hours"])).quantize(Decimal("0.01")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.user_id=%s AND ar.work_date=%s
                """,
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, work_date, check_in_time, status)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (user_id, work_date, check_in_time, status.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("Already checked in today") from e
            raise StoreError(f"Cannot record check-in: {e}") from e

    def fill_checkin(self, *, attendance_id: int, check_in_time: datetime, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, status=%s
                WHERE attendance_id=%s AND check_in_time IS NULL
                """,
                (check_in_time, status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def complete_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        total_hours: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s, total_hours=%s
                WHERE attendance_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (check_out_time, status.value, total_hours, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["ar.user_id=%s"]
        params: list[object] = [int(user_id)]

        if start_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(end_date)

        sql = f"""
            SELECT {_RECORD_COLUMNS}
            FROM attendance_records ar
            WHERE {" AND ".join(clauses)}
            ORDER BY ar.work_date DESC
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def summarize_for_user(self, user_id: int, *, start_date: date, end_date: date) -> AttendanceSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SUMMARY_COLUMNS}
                FROM attendance_records ar
                WHERE ar.user_id=%s AND ar.work_date BETWEEN %s AND %s
                """,
                (int(user_id), start_date, end_date),
            )
            return _to_summary(fetchone(cur))

    def list_team_records(
        self,
        manager_id: int,
        *,
        filters: AttendanceFilter,
        user_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRow]:
        clauses = ["u.manager_id=%s"]
        params: list[object] = [int(manager_id)]

        if user_id is not None:
            clauses.append("u.user_id=%s")
            params.append(int(user_id))
        if filters.employee_code:
            clauses.append("u.employee_code=%s")
            params.append(filters.employee_code)
        if filters.work_date is not None:
            clauses.append("ar.work_date=%s")
            params.append(filters.work_date)
        if filters.has_range:
            clauses.append("ar.work_date BETWEEN %s AND %s")
            params.extend([filters.start_date, filters.end_date])
        if filters.status is not None:
            clauses.append("ar.status=%s")
            params.append(filters.status.value)

        sql = f"""
            SELECT {_RECORD_COLUMNS},
                   u.full_name, u.email, u.employee_code, u.department
            FROM attendance_records ar
            JOIN users u ON u.user_id = ar.user_id
            WHERE {" AND ".join(clauses)}
            ORDER BY ar.work_date DESC, u.full_name ASC
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_row(r) for r in fetchall(cur)]

    def summarize_team(self, manager_id: int, *, start_date: date, end_date: date) -> tuple[int, AttendanceSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(DISTINCT ar.user_id) AS total_employees, {_SUMMARY_COLUMNS}
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                WHERE u.manager_id=%s AND ar.work_date BETWEEN %s AND %s
                """,
                (int(manager_id), start_date, end_date),
            )
            r = fetchone(cur)
            total = int(r["total_employees"]) if r else 0
            return total, _to_summary(r)

    def team_status_for_date(self, manager_id: int, work_date: date) -> Sequence[TeamMemberStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.full_name, u.email, u.employee_code, u.department,
                       ar.check_in_time, ar.check_out_time, ar.status
                FROM users u
                LEFT JOIN attendance_records ar ON ar.user_id = u.user_id AND ar.work_date = %s
                WHERE u.role=%s AND u.manager_id=%s
                ORDER BY u.full_name ASC
                """,
                (work_date, Role.EMPLOYEE.value, int(manager_id)),
            )
            out: list[TeamMemberStatus] = []
            for r in fetchall(cur):
                status = r.get("status")
                out.append(
                    TeamMemberStatus(
                        user_id=int(r["user_id"]),
                        full_name=r["full_name"],
                        email=r["email"],
                        employee_code=r["employee_code"],
                        department=r.get("department"),
                        check_in_time=r.get("check_in_time"),
                        check_out_time=r.get("check_out_time"),
                        status=AttendanceStatus(status) if status else determine_status(None),
                    )
                )
            return out
