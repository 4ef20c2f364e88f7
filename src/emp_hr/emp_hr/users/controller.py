from __future__ import annotations

from dataclasses import asdict

from flask import Flask, g

from ..common.http import int_value, json_body, ok, roles_required, token_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        body = json_body()
        employee = container.auth_service.register(
            first_name=body.get("first_name", ""),
            last_name=body.get("last_name", ""),
            work_email=body.get("work_email", ""),
            password=body.get("password", ""),
            department=body.get("department"),
            shift_label=body.get("shift_label"),
            mobile_number=body.get("mobile_number"),
            designation=body.get("designation"),
        )
        return ok("Registered", 201, user=employee.to_public())

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        body = json_body()
        result = container.auth_service.authenticate(body.get("work_email", ""), body.get("password", ""))
        return ok("Login successful", **result.to_dict())

    @app.route("/api/shifts", methods=["GET"], endpoint="list_shifts")
    @token_required
    def list_shifts():
        shifts = container.shifts_repo.list_all()
        return ok(
            shifts=[
                {"label": s.label, "start": s.start.strftime("%H:%M"), "end": s.end.strftime("%H:%M"), "text": s.describe()}
                for s in shifts
            ]
        )

    @app.route("/api/users/me", methods=["GET"], endpoint="me")
    @token_required
    def me():
        return ok(user=g.user.to_public())

    @app.route("/api/users/me", methods=["PUT"], endpoint="update_me")
    @token_required
    def update_me():
        employee = container.user_service.update_profile(g.user.employee_id, json_body())
        return ok("Profile updated", user=employee.to_public())

    @app.route("/api/users/team", methods=["GET"], endpoint="my_team")
    @roles_required(Role.TEAMLEADER, Role.ADMIN)
    def my_team():
        members = container.user_service.team_members(g.user.employee_id)
        return ok(users=[m.to_public() for m in members])

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @roles_required(Role.ADMIN)
    def admin_users():
        users = container.user_service.list_employees(current_role=g.user.role)
        return ok(users=[u.to_public() for u in users])

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_create_user")
    @roles_required(Role.ADMIN)
    def admin_create_user():
        body = json_body()
        employee = container.user_service.create_employee(
            current_role=g.user.role,
            first_name=body.get("first_name", ""),
            last_name=body.get("last_name", ""),
            work_email=body.get("work_email", ""),
            password=body.get("password", ""),
            role=body.get("role", Role.EMPLOYEE.value),
            department=body.get("department"),
            shift_label=body.get("shift_label"),
            employee_code=body.get("employee_code"),
            mobile_number=body.get("mobile_number"),
            designation=body.get("designation"),
        )
        return ok("Employee created", 201, user=employee.to_public())

    @app.route("/api/admin/users/<int:employee_id>", methods=["PUT"], endpoint="admin_update_user")
    @roles_required(Role.ADMIN)
    def admin_update_user(employee_id: int):
        employee = container.user_service.update_employee(
            current_role=g.user.role, employee_id=employee_id, changes=json_body()
        )
        return ok("Employee updated", user=employee.to_public())

    @app.route("/api/admin/users/<int:employee_id>", methods=["DELETE"], endpoint="admin_delete_user")
    @roles_required(Role.ADMIN)
    def admin_delete_user(employee_id: int):
        container.user_service.delete_employee(
            current_role=g.user.role, current_user_id=g.user.employee_id, employee_id=employee_id
        )
        return ok("Employee deleted")

    @app.route("/api/admin/users/<int:employee_id>/manager", methods=["PUT"], endpoint="admin_assign_manager")
    @roles_required(Role.ADMIN)
    def admin_assign_manager(employee_id: int):
        body = json_body()
        employee = container.user_service.assign_manager(
            current_role=g.user.role,
            employee_id=employee_id,
            manager_id=int_value(body.get("manager_id"), "manager_id", required=False),
        )
        return ok("Reporting manager updated", user=employee.to_public())

    @app.route("/api/admin/stats", methods=["GET"], endpoint="admin_stats")
    @roles_required(Role.ADMIN)
    def admin_stats():
        return ok(stats=asdict(container.user_service.stats(current_role=g.user.role)))
