from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from ..attendance.model import AttendanceFilter, AttendanceRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import display_datetime, now_local

EXPORT_HEADER = [
    "Employee ID",
    "Name",
    "Email",
    "Department",
    "Date",
    "Check In",
    "Check Out",
    "Status",
    "Total Hours",
]


@dataclass(frozen=True)
class CsvReport:
    filename: str
    content: str


def export_row(row: AttendanceRow) -> list[str]:
    r = row.record
    return [
        row.employee_code or "",
        row.full_name or "",
        row.email or "",
        row.department or "",
        r.work_date.isoformat(),
        display_datetime(r.check_in_time),
        display_datetime(r.check_out_time),
        r.status.value,
        f"{r.total_hours:.2f}" if r.total_hours is not None else "",
    ]


def write_csv(rows: Sequence[AttendanceRow]) -> str:
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for row in rows:
        writer.writerow(export_row(row))
    return out.getvalue()


class AttendanceReportService:
    """CSV export of a manager's team attendance."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def export_team_csv(
        self,
        manager_id: int,
        *,
        filters: AttendanceFilter,
        now: datetime | None = None,
    ) -> CsvReport:
        now = now or now_local()
        scoped = AttendanceFilter(
            employee_code=filters.employee_code,
            start_date=filters.start_date,
            end_date=filters.end_date,
        )
        rows = self._attendance.list_team_records(manager_id, filters=scoped)
        filename = f"attendance-{int(now.timestamp() * 1000)}.csv"
        return CsvReport(filename=filename, content=write_csv(rows))
