"""Middleware modules."""

from taskboard.middleware.cors import register_cors
from taskboard.middleware.metrics import register_metrics_middleware
from taskboard.middleware.request_logging import register_request_logging


__all__ = ["register_cors", "register_request_logging", "register_metrics_middleware"]
