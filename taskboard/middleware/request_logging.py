"""One log line per incoming request."""

import logging

from flask import Flask, request


logger = logging.getLogger(__name__)


def register_request_logging(app: Flask) -> None:
    @app.before_request
    def log_request() -> None:
        target = request.path
        if request.query_string:
            target = f"{target}?{request.query_string.decode('utf-8', 'replace')}"
        logger.info("%s %s", request.method, target)
