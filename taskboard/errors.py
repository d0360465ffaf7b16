"""Error handlers with OpenTelemetry trace context."""

import logging

from flask import Flask, jsonify
from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError

from taskboard.extensions import db


logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"


def error_response(message: str, status_code: int, details: dict | None = None) -> tuple:
    """Create error response with trace context.

    Use this function in routes instead of returning jsonify directly.

    Args:
        message: Error message.
        status_code: HTTP status code.
        details: Optional per-field messages, returned under "details".

    Returns:
        Tuple of (response, status_code).
    """
    response: dict = {"error": message}
    if details:
        response["details"] = details

    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        response["trace_id"] = format(span_context.trace_id, "032x")

    return jsonify(response), status_code


def register_error_handlers(app: Flask) -> None:
    """Register error handlers on Flask app."""

    @app.errorhandler(400)
    def bad_request(error):
        return error_response("Bad request", 400)

    @app.errorhandler(404)
    def not_found(error):
        return error_response("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response("Method not allowed", 405)

    @app.errorhandler(SQLAlchemyError)
    def database_error(error):
        db.session.rollback()
        logger.exception("Database error while handling request")
        return error_response(SERVER_ERROR_MESSAGE, 500)

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        logger.error("Unhandled error: %s", getattr(error, "original_exception", error))
        return error_response(SERVER_ERROR_MESSAGE, 500)
