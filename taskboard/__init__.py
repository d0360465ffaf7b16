"""Flask application factory with OpenTelemetry instrumentation."""

import logging

from flask import Flask

from taskboard.extensions import db
from taskboard.store import EXTENSION_KEY, TaskStore
from taskboard.telemetry import telemetry_enabled


def create_app(config_class: type | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use. Defaults to Config.

    Returns:
        Configured Flask application instance.
    """
    # Initialize telemetry BEFORE creating Flask app
    if telemetry_enabled():
        from taskboard.telemetry import get_otel_log_handler, instrument_flask_app, setup_telemetry

        setup_telemetry()

    app = Flask(__name__)

    if config_class is None:
        from taskboard.config import Config

        config_class = Config
    app.config.from_object(config_class)

    if telemetry_enabled():
        instrument_flask_app(app)

    db.init_app(app)
    app.extensions[EXTENSION_KEY] = TaskStore(db)

    # CORS first so preflights short-circuit before anything else runs
    from taskboard.middleware.cors import register_cors
    from taskboard.middleware.request_logging import register_request_logging

    register_cors(app)
    register_request_logging(app)

    from taskboard.routes.health import health_bp
    from taskboard.routes.tasks import tasks_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(tasks_bp)

    from taskboard.errors import register_error_handlers

    register_error_handlers(app)

    if telemetry_enabled():
        from taskboard.middleware.metrics import register_metrics_middleware

        register_metrics_middleware(app)

        handler = get_otel_log_handler()
        if handler:
            root_logger = logging.getLogger()
            if handler not in root_logger.handlers:
                root_logger.addHandler(handler)

    _configure_logging()

    with app.app_context():
        db.create_all()

    return app


def _configure_logging() -> None:
    """Configure logging for the application."""
    # Console output when nothing else (OTel, pytest) owns the root logger
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # App loggers propagate to root (where the OTel handler is)
    logging.getLogger("taskboard").setLevel(logging.DEBUG)
    logging.getLogger("taskboard").propagate = True

    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").propagate = False

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
