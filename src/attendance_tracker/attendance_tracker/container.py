from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import AttendanceReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection | None

    users_repo: UserRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    dashboard_service: DashboardService

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()


def build_services(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    conn: DatabaseConnection | None = None,
) -> Container:
    """Wire services on top of any repository implementations."""

    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        strategy_factory=AttendanceStrategyFactory(),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        attendance_service=attendance_service,
        report_service=AttendanceReportService(attendance_repo),
        dashboard_service=DashboardService(attendance_service),
    )


def build_container(*, db_config: dict, pool_size: int = 5) -> Container:
    config = DBConfig.from_dict(db_config, pool_size=pool_size)
    conn = DatabaseConnection(config)

    return build_services(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        conn=conn,
    )
