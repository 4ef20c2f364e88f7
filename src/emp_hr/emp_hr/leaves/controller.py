from __future__ import annotations

from flask import Flask, g, request

from ..common.http import date_value, int_value, json_body, ok, roles_required, token_required
from ..container import Container
from ..core.enums import Role


def _leave_request(body: dict) -> dict:
    return {
        "leave_date": date_value(body.get("date"), "date"),
        "kind": body.get("type"),
        "portion": body.get("duration") or "full",
        "half": body.get("half"),
        "reason": body.get("reason"),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["POST"], endpoint="leave_apply")
    @token_required
    def apply_leave():
        leave = container.leave_service.apply(g.user.employee_id, **_leave_request(json_body()))
        return ok("Leave applied", 201, leave=leave.to_dict())

    @app.route("/api/leaves/past", methods=["POST"], endpoint="leave_record_past")
    @token_required
    def record_past_leave():
        leave = container.leave_service.record_past(g.user.employee_id, **_leave_request(json_body()))
        return ok("Past leave recorded", 201, leave=leave.to_dict())

    @app.route("/api/leaves", methods=["GET"], endpoint="leave_history")
    @token_required
    def leave_history():
        page = container.leave_service.history(
            g.user.employee_id,
            page=int_value(request.args.get("page"), "page", required=False) or 1,
            limit=int_value(request.args.get("limit"), "limit", required=False) or 10,
        )
        return ok(**page.to_dict())

    @app.route("/api/leaves/balance", methods=["GET"], endpoint="leave_balance")
    @token_required
    def leave_balance():
        return ok(balance=container.leave_service.balance(g.user.employee_id).to_dict())

    @app.route("/api/leaves/<int:leave_id>", methods=["DELETE"], endpoint="leave_cancel")
    @token_required
    def cancel_leave(leave_id: int):
        container.leave_service.cancel(g.user.employee_id, leave_id)
        return ok("Leave cancelled")

    @app.route("/api/leaves/pending", methods=["GET"], endpoint="leave_pending")
    @roles_required(Role.TEAMLEADER, Role.ADMIN)
    def pending_leaves():
        leaves = container.leave_service.pending_for(g.user.employee_id)
        return ok(leaves=[l.to_dict() for l in leaves])

    @app.route("/api/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="leave_approve")
    @roles_required(Role.TEAMLEADER, Role.ADMIN)
    def approve_leave(leave_id: int):
        leave = container.leave_service.approve(g.user.employee_id, leave_id)
        return ok("Leave approved", leave=leave.to_dict())

    @app.route("/api/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="leave_reject")
    @roles_required(Role.TEAMLEADER, Role.ADMIN)
    def reject_leave(leave_id: int):
        leave = container.leave_service.reject(g.user.employee_id, leave_id, reason=json_body().get("reason"))
        return ok("Leave rejected", leave=leave.to_dict())
