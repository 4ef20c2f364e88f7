from __future__ import annotations

from flask import Flask, g, request

from ..common.http import date_value, datetime_value, json_body, ok, token_required
from ..container import Container
from ..core.exceptions import ValidationError
from .model import Location


def _location(body: dict) -> Location:
    try:
        return Location.from_payload(body.get("location"))
    except (TypeError, ValueError):
        raise ValidationError("Invalid location") from None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @token_required
    def check_in():
        punch = container.attendance_service.check_in(g.user.employee_id, location=_location(json_body()))
        return ok("Checked in", 201, attendance=punch.to_dict())

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @token_required
    def check_out():
        punch = container.attendance_service.check_out(g.user.employee_id, location=_location(json_body()))
        return ok("Checked out", attendance=punch.to_dict())

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @token_required
    def today():
        return ok(**container.attendance_service.today(g.user.employee_id).to_dict())

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @token_required
    def history():
        rows = container.attendance_service.history(
            g.user.employee_id,
            start=date_value(request.args.get("start"), "start", required=False),
            end=date_value(request.args.get("end"), "end", required=False),
        )
        return ok(attendance=rows)

    @app.route("/api/attendance/<int:punch_id>/correction", methods=["PUT"], endpoint="attendance_correct")
    @token_required
    def correct(punch_id: int):
        body = json_body()
        punch = container.attendance_service.correct_punch(
            g.user.employee_id,
            punch_id,
            corrected_check_in=datetime_value(body.get("check_in"), "check_in"),
            corrected_check_out=datetime_value(body.get("check_out"), "check_out"),
            reason=body.get("reason"),
        )
        return ok("Attendance corrected", attendance=punch.to_dict())
