from __future__ import annotations

from flask import Flask, g, request

from ..common.http import date_value, int_value, json_body, ok, roles_required, token_required
from ..container import Container
from ..core.enums import Role

_SESSION_FIELDS = (
    "batch_id",
    "day_number",
    "session_time",
    "meeting_link",
    "assigned_tutor",
    "assigned_counselor",
    "quiz_link",
    "counseling_link",
)


def _batch_changes(body: dict) -> dict:
    changes = {}
    if "batch_number" in body:
        changes["batch_number"] = body["batch_number"]
    if "program_id" in body:
        changes["program_id"] = int_value(body["program_id"], "program_id")
    for key in ("start_date", "end_date"):
        if key in body:
            changes[key] = date_value(body[key], key)
    return changes


def _session_changes(body: dict) -> dict:
    changes = {k: body[k] for k in _SESSION_FIELDS if k in body}
    if "session_date" in body:
        changes["session_date"] = date_value(body["session_date"], "session_date")
    return changes


def register(app: Flask, container: Container) -> None:
    svc = container.training_service

    @app.route("/api/training/programs", methods=["GET"], endpoint="training_programs")
    @token_required
    def list_programs():
        return ok(programs=[p.to_dict() for p in svc.list_programs()])

    @app.route("/api/training/programs", methods=["POST"], endpoint="training_create_program")
    @roles_required(Role.ADMIN)
    def create_program():
        body = json_body()
        program = svc.create_program(
            current_role=g.user.role,
            name=body.get("name", ""),
            duration=body.get("duration", ""),
            description=body.get("description"),
        )
        return ok("Program created", 201, program=program.to_dict())

    @app.route("/api/training/programs/<int:program_id>", methods=["PUT"], endpoint="training_update_program")
    @roles_required(Role.ADMIN)
    def update_program(program_id: int):
        program = svc.update_program(current_role=g.user.role, program_id=program_id, changes=json_body())
        return ok("Program updated", program=program.to_dict())

    @app.route("/api/training/programs/<int:program_id>", methods=["DELETE"], endpoint="training_delete_program")
    @roles_required(Role.ADMIN)
    def delete_program(program_id: int):
        svc.delete_program(current_role=g.user.role, program_id=program_id)
        return ok("Program deleted")

    @app.route("/api/training/batches", methods=["GET"], endpoint="training_batches")
    @token_required
    def list_batches():
        return ok(batches=[b.to_dict() for b in svc.list_batches()])

    @app.route("/api/training/batches", methods=["POST"], endpoint="training_create_batch")
    @roles_required(Role.ADMIN)
    def create_batch():
        body = json_body()
        batch = svc.create_batch(
            current_role=g.user.role,
            batch_number=body.get("batch_number", ""),
            program_id=int_value(body.get("program_id"), "program_id"),
            start_date=date_value(body.get("start_date"), "start_date"),
            end_date=date_value(body.get("end_date"), "end_date"),
        )
        return ok("Batch created", 201, batch=batch.to_dict())

    @app.route("/api/training/batches/<int:batch_id>", methods=["PUT"], endpoint="training_update_batch")
    @roles_required(Role.ADMIN)
    def update_batch(batch_id: int):
        batch = svc.update_batch(current_role=g.user.role, batch_id=batch_id, changes=_batch_changes(json_body()))
        return ok("Batch updated", batch=batch.to_dict())

    @app.route("/api/training/batches/<int:batch_id>", methods=["DELETE"], endpoint="training_delete_batch")
    @roles_required(Role.ADMIN)
    def delete_batch(batch_id: int):
        svc.delete_batch(current_role=g.user.role, batch_id=batch_id)
        return ok("Batch deleted")

    @app.route("/api/training/sessions", methods=["GET"], endpoint="training_sessions")
    @token_required
    def list_sessions():
        batch_id = int_value(request.args.get("batch_id"), "batch_id", required=False)
        return ok(sessions=[s.to_dict() for s in svc.list_sessions(batch_id=batch_id)])

    @app.route("/api/training/sessions", methods=["POST"], endpoint="training_create_session")
    @roles_required(Role.ADMIN)
    def create_session():
        body = json_body()
        changes = _session_changes(body)
        session_date = changes.pop("session_date", None) or date_value(None, "session_date")
        session = svc.create_session(current_role=g.user.role, session_date=session_date, **changes)
        return ok("Session created", 201, session=session.to_dict())

    @app.route("/api/training/sessions/<int:session_id>", methods=["PUT"], endpoint="training_update_session")
    @roles_required(Role.ADMIN)
    def update_session(session_id: int):
        session = svc.update_session(
            current_role=g.user.role, session_id=session_id, changes=_session_changes(json_body())
        )
        return ok("Session updated", session=session.to_dict())

    @app.route("/api/training/sessions/<int:session_id>", methods=["DELETE"], endpoint="training_delete_session")
    @roles_required(Role.ADMIN)
    def delete_session(session_id: int):
        svc.delete_session(current_role=g.user.role, session_id=session_id)
        return ok("Session deleted")
