import pytest
from werkzeug.security import check_password_hash

from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.attendance_tracker.attendance_tracker.users.service import AuthService, UserService

from tests.fakes import PASSWORD


@pytest.fixture
def user_service(users_repo) -> UserService:
    return UserService(users_repo)


def register(service: UserService, **overrides):
    data = dict(full_name="New Person", email="new@example.com", password="secret123", role="employee", manager_id=1)
    data.update(overrides)
    return service.register(**data)


def test_register_employee_assigns_next_code_and_manager(user_service):
    user = register(user_service, department="  Ops ")

    assert user.role == Role.EMPLOYEE
    assert user.employee_code == "EMP021"
    assert user.manager_id == 1
    assert user.department == "Ops"
    assert check_password_hash(user.password_hash, "secret123")


def test_register_manager_gets_manager_code(user_service):
    user = register(user_service, role="manager", manager_id=None)

    assert user.employee_code == "MGR003"
    assert user.manager_id is None


def test_employee_codes_are_not_reused_after_deletion(user_service, users_repo):
    del users_repo.users_by_id[11]

    first = register(user_service)
    second = register(user_service, email="second@example.com")

    assert (first.employee_code, second.employee_code) == ("EMP021", "EMP022")


def test_non_string_fields_are_rejected(user_service):
    with pytest.raises(ValidationError):
        register(user_service, password=1234567)
    with pytest.raises(ValidationError):
        register(user_service, email=42)
    with pytest.raises(ValidationError):
        register(user_service, department=["Ops"])


def test_email_is_normalized(user_service):
    assert register(user_service, email="  New@Example.COM ").email == "new@example.com"


def test_employee_without_manager_is_rejected(user_service):
    with pytest.raises(ValidationError, match="Manager is required"):
        register(user_service, manager_id=None)


def test_manager_with_manager_is_rejected(user_service):
    with pytest.raises(ValidationError, match="cannot be assigned"):
        register(user_service, role="manager", manager_id=1)


def test_employee_referencing_non_manager_is_rejected(user_service):
    with pytest.raises(ValidationError, match="Invalid manager selected"):
        register(user_service, manager_id=10)


def test_employee_referencing_unknown_manager_is_rejected(user_service):
    with pytest.raises(ValidationError, match="Invalid manager selected"):
        register(user_service, manager_id=999)


@pytest.mark.parametrize(
    "overrides",
    [
        {"full_name": "  "},
        {"email": "not-an-email"},
        {"password": "12345"},
        {"role": "admin"},
        {"manager_id": "abc"},
    ],
)
def test_invalid_input_is_rejected(user_service, overrides):
    with pytest.raises(ValidationError):
        register(user_service, **overrides)


def test_duplicate_email_conflicts(user_service):
    with pytest.raises(ConflictError, match="Email already registered"):
        register(user_service, email="user10@example.com")


def test_get_profile_unknown_user(user_service):
    with pytest.raises(NotFoundError):
        user_service.get_profile(404)


def test_list_managers_only_returns_managers(user_service):
    assert [m.user_id for m in user_service.list_managers()] == [1, 2]


def test_authenticate_success(users_repo):
    user = AuthService(users_repo).authenticate("USER10@example.com", PASSWORD)

    assert user.user_id == 10


@pytest.mark.parametrize("email, password", [("user10@example.com", "wrong-pass"), ("nobody@example.com", PASSWORD)])
def test_authenticate_failure(users_repo, email, password):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        AuthService(users_repo).authenticate(email, password)
