"""JSON error responses.

Every failure leaves the API as ``{"success": false, "error": {...}}``.
Domain errors keep their status and code; anything else is a 500 whose
message is hidden outside development.
"""

from __future__ import annotations

import traceback

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..common.error_logger import ErrorSink, request_context
from ..common.logger import get_logger
from ..core.exceptions import DomainError
from ..database.errors import DatabaseError

logger = get_logger(__name__)


def _body(error: dict):
    return {"success": False, "error": error}


def register(app: Flask, error_logger: ErrorSink, *, development: bool = False) -> None:
    def _log(exc: BaseException) -> None:
        try:
            error_logger.log(exc, request_context(request))
        except Exception:
            logger.exception("Error logger failed")

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        # database errors were already written to the sink by the connection manager
        if not isinstance(exc, DatabaseError):
            _log(exc)
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.message)
        return jsonify(_body(exc.to_dict(include_stack=development))), exc.status_code

    @app.errorhandler(404)
    def handle_not_found(exc):
        message = f"Route {request.path} not found"
        return jsonify(_body({"message": message, "code": "NOT_FOUND_ERROR"})), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(exc):
        message = f"Method {request.method} not allowed for {request.path}"
        return jsonify(_body({"message": message, "code": "METHOD_NOT_ALLOWED"})), 405

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return jsonify(_body({"message": exc.description, "code": exc.name.upper().replace(" ", "_")})), exc.code

        logger.exception("Unhandled error on %s %s", request.method, request.path)
        _log(exc)
        error = {"message": str(exc) if development else "Internal Server Error", "code": "INTERNAL_ERROR"}
        if development:
            error["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return jsonify(_body(error)), 500
