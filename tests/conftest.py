from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.core.enums import Role

from tests.fakes import InMemoryAttendance, InMemoryUsers, make_user


@pytest.fixture
def users_repo() -> InMemoryUsers:
    # Two managers (1, 2); employees 10, 11 report to 1 and 20 to 2.
    return InMemoryUsers(
        [
            make_user(1, Role.MANAGER, name="Alice Manager"),
            make_user(2, Role.MANAGER, name="Bob Manager"),
            make_user(10, Role.EMPLOYEE, manager_id=1, name="Carol", department="Engineering"),
            make_user(11, Role.EMPLOYEE, manager_id=1, name="Dave", department="Sales"),
            make_user(20, Role.EMPLOYEE, manager_id=2, name="Erin"),
        ]
    )


@pytest.fixture
def attendance_repo(users_repo) -> InMemoryAttendance:
    return InMemoryAttendance(users_repo)
