"""JSON envelopes and error mapping shared by the feature controllers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def ok(data: Any, *, status: int = 200, count: Optional[int] = None, message: Optional[str] = None):
    body: dict = {"success": True}
    if count is not None:
        body["count"] = count
    body["data"] = data
    if message:
        body["message"] = message
    return jsonify(body), status


def fail(message: str, status: int, **extra: Any):
    body = {"success": False, "message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), 400, errors=[err.to_dict() for err in e.errors] or None)

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return fail(str(e), 409)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e), 404)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return fail(str(e), 403)

    @app.errorhandler(AuthenticationError)
    def _unauthenticated(e: AuthenticationError):
        return fail(str(e), 401)

    @app.errorhandler(404)
    def _no_route(e):
        return fail("Route not found", 404)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _server_error(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Server Error", 500, error=str(e) if app.config.get("DEBUG") else None)
