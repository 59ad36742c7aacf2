from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_json_object
from ..container import Container
from .tokens import current_user_id, issue_token, login_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/managers", methods=["GET"], endpoint="auth_managers")
    def managers():
        items = container.user_service.list_managers()
        return jsonify({"managers": [m.to_dict() for m in items]})

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def register_account():
        data = require_json_object(request.get_json(silent=True))
        user = container.user_service.register(
            full_name=data.get("full_name") or data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=data.get("role", ""),
            department=data.get("department"),
            manager_id=data.get("manager_id"),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "message": "Registration successful",
                    "token": issue_token(user),
                    "user": user.to_public_dict(),
                }
            ),
            201,
        )

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = require_json_object(request.get_json(silent=True))
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        return jsonify(
            {
                "success": True,
                "message": "Login successful",
                "token": issue_token(user),
                "user": user.to_public_dict(),
            }
        )

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        user = container.user_service.get_profile(current_user_id())
        return jsonify({"user": user.to_public_dict()})
