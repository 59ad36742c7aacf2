from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for endpoint gating and manager scoping."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record."""

    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half-day"
    ABSENT = "absent"
