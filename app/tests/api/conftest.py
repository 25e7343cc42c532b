"""Fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter
from infrastructure.services import get_notification_service, get_settings


@pytest.fixture(autouse=True)
def disable_rate_limits():
    limiter = get_limiter()
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def app(settings):
    from server.server import create_app

    application = create_app()
    application.dependency_overrides[get_settings] = lambda: settings
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)
