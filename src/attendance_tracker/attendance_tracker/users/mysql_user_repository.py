from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ConflictError, StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import ManagerOption, User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, full_name, email, password_hash, role, employee_code,
    department, manager_id, created_at
"""


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        employee_code=row["employee_code"],
        department=row.get("department"),
        manager_id=int(row["manager_id"]) if row.get("manager_id") is not None else None,
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def max_code_number(self, prefix: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(MAX(CAST(SUBSTRING(employee_code, %s) AS UNSIGNED)), 0) AS max_number
                FROM users
                WHERE employee_code LIKE %s
                """,
                (len(prefix) + 1, f"{prefix}%"),
            )
            row = fetchone(cur)
            return int(row["max_number"]) if row else 0

    def create_user(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        employee_code: str,
        department: Optional[str],
        manager_id: Optional[int],
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(full_name, email, password_hash, role, employee_code, department, manager_id)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (full_name, email, password_hash, role.value, employee_code, department, manager_id),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("Email or employee ID already registered") from e
            raise StoreError(f"Cannot create user: {e}") from e

    def list_managers(self) -> Sequence[ManagerOption]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, employee_code, department
                FROM users
                WHERE role=%s
                ORDER BY full_name
                """,
                (Role.MANAGER.value,),
            )
            return [
                ManagerOption(
                    user_id=int(r["user_id"]),
                    full_name=r["full_name"],
                    email=r["email"],
                    employee_code=r["employee_code"],
                    department=r.get("department"),
                )
                for r in fetchall(cur)
            ]
