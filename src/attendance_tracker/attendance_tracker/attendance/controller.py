from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, resolve_month
from ..container import Container
from ..users.tokens import current_user_id, employee_required, manager_required
from .service import build_filter


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    # Employee endpoints

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @employee_required
    def checkin():
        record = service.check_in(current_user_id())
        return jsonify(
            {
                "success": True,
                "message": "Checked in successfully",
                "check_in_time": record.check_in_time.isoformat(),
                "status": record.status.value,
            }
        )

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="attendance_checkout")
    @employee_required
    def checkout():
        record = service.check_out(current_user_id())
        return jsonify(
            {
                "success": True,
                "message": "Checked out successfully",
                "check_out_time": record.check_out_time.isoformat(),
                "status": record.status.value,
                "total_hours": float(record.total_hours),
            }
        )

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @employee_required
    def today():
        return jsonify(service.get_today(current_user_id()).to_dict())

    @app.route("/api/attendance/my-history", methods=["GET"], endpoint="attendance_my_history")
    @employee_required
    def my_history():
        month_s = request.args.get("month")
        year_s = request.args.get("year")
        year = month = None
        if month_s and year_s:
            year, month = resolve_month(month_s, year_s, today=now_local().date())
        records = service.get_history(current_user_id(), year=year, month=month)
        return jsonify({"attendance": [r.to_dict() for r in records]})

    @app.route("/api/attendance/my-summary", methods=["GET"], endpoint="attendance_my_summary")
    @employee_required
    def my_summary():
        year, month = resolve_month(request.args.get("month"), request.args.get("year"), today=now_local().date())
        summary = service.get_monthly_summary(current_user_id(), year=year, month=month)
        return jsonify({"summary": summary.to_dict(), "month": month, "year": year})

    # Manager endpoints

    @app.route("/api/attendance/all", methods=["GET"], endpoint="attendance_all")
    @manager_required
    def all_records():
        filters = build_filter(
            employee_code=request.args.get("employee_id"),
            work_date=request.args.get("date"),
            status=request.args.get("status"),
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
        )
        rows = service.list_team_records(current_user_id(), filters=filters)
        return jsonify({"attendance": [r.to_dict() for r in rows]})

    @app.route("/api/attendance/employee/<int:employee_id>", methods=["GET"], endpoint="attendance_employee")
    @manager_required
    def employee_records(employee_id: int):
        filters = build_filter(start_date=request.args.get("start_date"), end_date=request.args.get("end_date"))
        rows = service.list_employee_records(
            current_user_id(),
            employee_id,
            start_date=filters.start_date if filters.has_range else None,
            end_date=filters.end_date if filters.has_range else None,
        )
        return jsonify({"attendance": [r.to_dict() for r in rows]})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @manager_required
    def team_summary():
        year, month = resolve_month(request.args.get("month"), request.args.get("year"), today=now_local().date())
        summary = service.get_team_summary(current_user_id(), year=year, month=month)
        return jsonify({"summary": summary.to_dict(), "month": month, "year": year})

    @app.route("/api/attendance/export", methods=["GET"], endpoint="attendance_export")
    @manager_required
    def export_csv():
        filters = build_filter(
            employee_code=request.args.get("employee_id"),
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
        )
        report = container.report_service.export_team_csv(current_user_id(), filters=filters)
        return app.response_class(
            report.content,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={report.filename}"},
        )

    @app.route("/api/attendance/today-status", methods=["GET"], endpoint="attendance_today_status")
    @manager_required
    def today_status():
        members = service.get_team_status(current_user_id())
        return jsonify({"employees": [m.to_dict() for m in members]})
