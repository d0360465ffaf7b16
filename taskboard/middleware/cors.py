"""Fixed-origin CORS headers."""

from flask import Flask, current_app, request


ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


def register_cors(app: Flask) -> None:
    """Add CORS headers to every response and answer preflights.

    ``OPTIONS`` requests never reach a route: they get an empty 200.

    Args:
        app: Flask application instance.
    """

    @app.before_request
    def short_circuit_preflight():
        if request.method == "OPTIONS":
            return current_app.response_class(status=200)
        return None

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = current_app.config["CORS_ORIGIN"]
        response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
        response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
        response.headers["Access-Control-Allow-Credentials"] = "true"
        return response
