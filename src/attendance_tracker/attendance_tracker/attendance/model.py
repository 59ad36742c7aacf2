from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import iso_or_none
from ..core.enums import AttendanceStatus


def _hours_or_none(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (user, work_date)."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    total_hours: Optional[Decimal] = None
    created_at: Optional[datetime] = None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_time is not None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None

    def with_checkout(self, *, check_out_time: datetime, status: AttendanceStatus, total_hours: Decimal) -> "AttendanceRecord":
        return replace(self, check_out_time=check_out_time, status=status, total_hours=total_hours)

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "check_in_time": iso_or_none(self.check_in_time),
            "check_out_time": iso_or_none(self.check_out_time),
            "status": self.status.value,
            "total_hours": _hours_or_none(self.total_hours),
            "created_at": iso_or_none(self.created_at),
        }


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model: attendance record joined with its owner (manager views, export)."""

    record: AttendanceRecord
    full_name: str
    email: str
    employee_code: str
    department: Optional[str] = None

    def to_dict(self) -> dict:
        out = self.record.to_dict()
        out.update(
            {
                "name": self.full_name,
                "email": self.email,
                "employee_id": self.employee_code,
                "department": self.department,
            }
        )
        return out


@dataclass(frozen=True)
class TodayStatus:
    """Check-in state of one employee for the current day."""

    checked_in: bool
    checked_out: bool
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    total_hours: Optional[Decimal] = None

    @classmethod
    def from_record(cls, record: Optional[AttendanceRecord]) -> "TodayStatus":
        if record is None:
            return cls(checked_in=False, checked_out=False, status=AttendanceStatus.ABSENT)
        return cls(
            checked_in=record.is_checked_in,
            checked_out=record.is_checked_out,
            status=record.status,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            total_hours=record.total_hours,
        )

    def to_dict(self) -> dict:
        return {
            "checked_in": self.checked_in,
            "checked_out": self.checked_out,
            "check_in_time": iso_or_none(self.check_in_time),
            "check_out_time": iso_or_none(self.check_out_time),
            "status": self.status.value,
            "total_hours": _hours_or_none(self.total_hours),
        }


@dataclass(frozen=True)
class AttendanceSummary:
    """Status counts and hours over a date window."""

    present: int = 0
    absent: int = 0
    late: int = 0
    half_day: int = 0
    total_hours: Decimal = Decimal("0.00")

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "half_day": self.half_day,
            "total_hours": float(self.total_hours),
        }


@dataclass(frozen=True)
class TeamSummary:
    total_employees: int
    counts: AttendanceSummary

    def to_dict(self) -> dict:
        return {
            "total_employees": self.total_employees,
            "total_present": self.counts.present,
            "total_absent": self.counts.absent,
            "total_late": self.counts.late,
            "total_half_day": self.counts.half_day,
            "total_hours": float(self.counts.total_hours),
        }


@dataclass(frozen=True)
class TeamMemberStatus:
    """An employee of a manager with their attendance for one day (if any)."""

    user_id: int
    full_name: str
    email: str
    employee_code: str
    department: Optional[str]
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus

    @property
    def is_at_work(self) -> bool:
        return self.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY)

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.full_name,
            "email": self.email,
            "employee_id": self.employee_code,
            "department": self.department,
            "check_in_time": iso_or_none(self.check_in_time),
            "check_out_time": iso_or_none(self.check_out_time),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceFilter:
    """Optional filters for manager-scoped record listings."""

    employee_code: Optional[str] = None
    work_date: Optional[date] = None
    status: Optional[AttendanceStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def has_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None
