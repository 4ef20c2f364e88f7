from __future__ import annotations

from flask import Flask, g, request

from ..common.http import date_value, int_value, json_body, ok, roles_required, token_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/weekoffs/departments/<department>", methods=["GET"], endpoint="weekoff_department")
    @token_required
    def get_department(department: str):
        return ok(weekoff=container.weekoff_service.get_department(department).to_dict())

    @app.route("/api/weekoffs/departments", methods=["PUT"], endpoint="weekoff_set_department")
    @roles_required(Role.ADMIN)
    def set_department():
        body = json_body()
        record = container.weekoff_service.set_department(
            current_role=g.user.role,
            admin_id=g.user.employee_id,
            department=body.get("department", ""),
            week_off_days=body.get("weekOffDays"),
        )
        return ok("Week-off days updated", weekoff=record.to_dict())

    @app.route("/api/weekoffs/overrides", methods=["GET"], endpoint="weekoff_overrides")
    @roles_required(Role.ADMIN)
    def list_overrides():
        overrides = container.weekoff_service.list_overrides(
            current_role=g.user.role,
            employee_id=int_value(request.args.get("employee_id"), "employee_id"),
            start=date_value(request.args.get("start"), "start"),
            end=date_value(request.args.get("end"), "end"),
        )
        return ok(overrides=[o.to_dict() for o in overrides])

    @app.route("/api/weekoffs/overrides", methods=["PUT"], endpoint="weekoff_set_override")
    @roles_required(Role.ADMIN)
    def set_override():
        body = json_body()
        override = container.weekoff_service.set_override(
            current_role=g.user.role,
            admin_id=g.user.employee_id,
            employee_id=int_value(body.get("employee_id"), "employee_id"),
            day=date_value(body.get("date"), "date"),
            is_week_off=bool(body.get("is_week_off", True)),
            reason=body.get("reason"),
        )
        return ok("Override saved", override=override.to_dict())

    @app.route("/api/weekoffs/overrides/<int:employee_id>/<day>", methods=["DELETE"], endpoint="weekoff_delete_override")
    @roles_required(Role.ADMIN)
    def delete_override(employee_id: int, day: str):
        container.weekoff_service.delete_override(
            current_role=g.user.role, employee_id=employee_id, day=date_value(day, "date")
        )
        return ok("Override removed")
