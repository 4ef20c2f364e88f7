"""JSON helpers, bearer-token decorators and domain error rendering shared by controllers."""

from __future__ import annotations

import logging
from datetime import date, datetime
from functools import wraps
from typing import Optional

from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date, parse_iso_datetime

logger = logging.getLogger(__name__)

CONTAINER_KEY = "emp_hr"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ConfigurationError, 500),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def ok(message: str = "", status: int = 200, **data):
    return jsonify({"success": True, "message": message, **data}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        status = status_for(e)
        if status >= 500:
            logger.error("%s: %s", type(e).__name__, e)
        return fail(str(e), status)

    @app.errorhandler(404)
    def _not_found(_e):
        return fail("Not found", 404)

    @app.errorhandler(405)
    def _method_not_allowed(_e):
        return fail("Method not allowed", 405)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return fail(f"Server error: {e}", 500)
        return fail("Server error", 500)


def container():
    return current_app.extensions[CONTAINER_KEY]


def token_required(view):
    """Require ``Authorization: Bearer <jwt>``; the caller lands on ``g.user``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Bearer "):
            raise AuthenticationError("Authentication required")

        c = container()
        claims = c.auth_service.decode_token(auth.split(" ", 1)[1].strip())
        user = c.users_repo.get_by_id(claims.user_id)
        if not user or not user.is_active:
            raise AuthenticationError("User not found")

        g.user = user
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles):
    def decorator(view):
        @wraps(view)
        @token_required
        def wrapper(*args, **kwargs):
            if g.user.role not in roles:
                raise AuthorizationError("Insufficient permissions")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def date_value(value, field_name: str, *, required: bool = True) -> Optional[date]:
    if value in (None, ""):
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None


def datetime_value(value, field_name: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO-8601 timestamp") from None


def int_value(value, field_name: str, *, required: bool = True) -> Optional[int]:
    if value in (None, ""):
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
