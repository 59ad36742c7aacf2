from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an employee or a manager.

    Plain data object (no DB access). Employees always carry ``manager_id``;
    managers never do.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    employee_code: str
    department: Optional[str] = None
    manager_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.full_name,
            "email": self.email,
            "role": self.role.value,
            "employee_id": self.employee_code,
            "department": self.department,
            "manager_id": self.manager_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class ManagerOption:
    """Manager entry offered on the registration form."""

    user_id: int
    full_name: str
    email: str
    employee_code: str
    department: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.full_name,
            "email": self.email,
            "employee_id": self.employee_code,
            "department": self.department,
        }
