from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_int, optional_str, require_email, require_min_length, require_non_empty
from ..core.constants import EMPLOYEE_CODE_PREFIX, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..core.logging import get_logger
from .model import ManagerOption, User
from .repository import UserRepository

logger = get_logger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> User:
        email = require_email(email)
        require_non_empty(password, "Password")

        user = self._users.get_by_email(email)
        if not user:
            logger.info("Login failed for %s: unknown email", email)
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            logger.info("Login failed for %s: wrong password", email)
            raise AuthenticationError("Invalid credentials")
        return user


class UserService:
    """Use case: register accounts and read profiles."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(
        self,
        *,
        full_name: str,
        email: str,
        password: str,
        role: str,
        department: Optional[str] = None,
        manager_id=None,
    ) -> User:
        full_name = require_non_empty(full_name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        try:
            role_e = Role(role)
        except ValueError:
            raise ValidationError("Role must be employee or manager")

        manager_ref = optional_int(manager_id, "Manager ID")
        if role_e == Role.EMPLOYEE and manager_ref is None:
            raise ValidationError("Manager is required for employee registration")
        if role_e == Role.MANAGER and manager_ref is not None:
            raise ValidationError("Managers cannot be assigned to another manager")

        if self._users.get_by_email(email):
            raise ConflictError("Email already registered")

        if role_e == Role.EMPLOYEE:
            manager = self._users.get_by_id(manager_ref)
            if not manager or not manager.is_manager:
                raise ValidationError("Invalid manager selected")

        department = (optional_str(department, "Department") or "").strip() or None
        employee_code = self._next_employee_code(role_e)

        user_id = self._users.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role_e,
            employee_code=employee_code,
            department=department,
            manager_id=manager_ref if role_e == Role.EMPLOYEE else None,
        )
        logger.info("Registered %s %s (user_id=%s)", role_e.value, employee_code, user_id)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _next_employee_code(self, role: Role) -> str:
        # Codes are never reused, even after users are deleted.
        prefix = EMPLOYEE_CODE_PREFIX[role.value]
        return f"{prefix}{self._users.max_code_number(prefix) + 1:03d}"

    def get_profile(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_managers(self) -> Sequence[ManagerOption]:
        return self._users.list_managers()
