"""Pytest fixtures for the task service."""

import os

import pytest


# Disable OpenTelemetry for tests
os.environ["OTEL_SDK_DISABLED"] = "true"

from tests.fakes import FakeClock  # noqa: E402


@pytest.fixture
def app():
    """Create test application."""
    from taskboard import create_app
    from taskboard.config import TestConfig

    app = create_app(TestConfig)
    app.config["TESTING"] = True

    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db(app):
    """Create test database."""
    from taskboard.extensions import db as _db

    with app.app_context():
        _db.create_all()
        yield _db
        _db.drop_all()


@pytest.fixture
def store(app):
    """The TaskStore registered on the test app."""
    from taskboard.store import EXTENSION_KEY

    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def clock(store):
    """Controllable clock installed on the store."""
    fake = FakeClock()
    store.clock = fake
    return fake

