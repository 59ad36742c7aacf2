from __future__ import annotations

from functools import wraps
from typing import Iterable

from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, verify_jwt_in_request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import User


def issue_token(user: User) -> str:
    """Signed access token carrying the user id as subject plus role/email claims."""
    return create_access_token(
        identity=str(user.user_id),
        additional_claims={"role": user.role.value, "email": user.email},
    )


def current_user_id() -> int:
    identity = get_jwt_identity()
    try:
        return int(identity)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token")


def current_role() -> Role:
    try:
        return Role(get_jwt().get("role"))
    except ValueError:
        raise AuthenticationError("Invalid token")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        return view(*args, **kwargs)

    return wrapper


def roles_required(roles: Iterable[Role]):
    allowed = frozenset(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if current_role() not in allowed:
                raise AuthorizationError("Access denied: insufficient permissions")
            return view(*args, **kwargs)

        return wrapper

    return decorator


employee_required = roles_required([Role.EMPLOYEE])
manager_required = roles_required([Role.MANAGER])
