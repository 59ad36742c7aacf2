from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import ManagerOption, User


class UserRepository(Protocol):
    """Repository interface for users.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def max_code_number(self, prefix: str) -> int:
        """Largest numeric suffix among employee codes with ``prefix`` (0 if none)."""
        raise NotImplementedError

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
        raise NotImplementedError

    def list_managers(self) -> Sequence[ManagerOption]:
        raise NotImplementedError
