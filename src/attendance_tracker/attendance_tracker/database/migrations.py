"""Ordered schema migrations.

Each step is applied once and recorded in ``schema_migrations``. New schema
changes are appended with the next version number; existing steps are never
edited after release.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    sql: str


MIGRATIONS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version INT NOT NULL PRIMARY KEY,
    description VARCHAR(255) NOT NULL,
    applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
"""


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        description="create users",
        sql="""
        CREATE TABLE users (
            user_id INT NOT NULL AUTO_INCREMENT PRIMARY KEY,
            full_name VARCHAR(255) NOT NULL,
            email VARCHAR(255) NOT NULL,
            password_hash VARCHAR(255) NOT NULL,
            role VARCHAR(20) NOT NULL,
            employee_code VARCHAR(50) NOT NULL,
            department VARCHAR(255) NULL,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_users_email UNIQUE (email),
            CONSTRAINT uq_users_employee_code UNIQUE (employee_code),
            CONSTRAINT chk_users_role CHECK (role IN ('employee', 'manager'))
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci;
        """,
    ),
    Migration(
        version=2,
        description="create attendance_records",
        sql="""
        CREATE TABLE attendance_records (
            attendance_id INT NOT NULL AUTO_INCREMENT PRIMARY KEY,
            user_id INT NOT NULL,
            work_date DATE NOT NULL,
            check_in_time DATETIME NULL,
            check_out_time DATETIME NULL,
            status VARCHAR(20) NOT NULL,
            total_hours DECIMAL(5, 2) NULL,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_attendance_user_date UNIQUE (user_id, work_date),
            CONSTRAINT fk_attendance_user FOREIGN KEY (user_id)
                REFERENCES users (user_id) ON DELETE CASCADE,
            CONSTRAINT chk_attendance_status CHECK (status IN ('present', 'absent', 'late', 'half-day')),
            CONSTRAINT chk_attendance_checkout_after_checkin CHECK (check_out_time IS NULL OR check_in_time IS NOT NULL)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci;
        CREATE INDEX idx_attendance_date ON attendance_records (work_date);
        """,
    ),
    Migration(
        version=3,
        description="add users.manager_id",
        sql="""
        ALTER TABLE users
            ADD COLUMN manager_id INT NULL AFTER department,
            ADD CONSTRAINT fk_users_manager FOREIGN KEY (manager_id) REFERENCES users (user_id);
        CREATE INDEX idx_users_manager ON users (manager_id);
        CREATE INDEX idx_users_role ON users (role);
        """,
    ),
    Migration(
        version=4,
        description="enforce role/manager hierarchy",
        # MySQL rejects CHECK constraints on columns with FK referential
        # actions, so fk_users_manager keeps the default RESTRICT.
        sql="""
        ALTER TABLE users
            ADD CONSTRAINT chk_users_role_manager CHECK (
                (role = 'employee' AND manager_id IS NOT NULL)
                OR (role = 'manager' AND manager_id IS NULL)
            );
        """,
    ),
)
