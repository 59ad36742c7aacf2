from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container
from ..users.tokens import current_user_id, employee_required, manager_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard/employee", methods=["GET"], endpoint="dashboard_employee")
    @employee_required
    def employee_dashboard():
        return jsonify(container.dashboard_service.employee_dashboard(current_user_id()).to_dict())

    @app.route("/api/dashboard/manager", methods=["GET"], endpoint="dashboard_manager")
    @manager_required
    def manager_dashboard():
        return jsonify(container.dashboard_service.manager_dashboard(current_user_id()).to_dict())
