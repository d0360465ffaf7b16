"""API route blueprints."""

from taskboard.routes.health import health_bp
from taskboard.routes.tasks import tasks_bp


__all__ = ["health_bp", "tasks_bp"]
