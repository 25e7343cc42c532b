"""Shared test fixtures."""

import pytest

from infrastructure.configuration import Settings
from infrastructure.configuration.features.notifications import NotificationSettings
from infrastructure.configuration.infrastructure import IdempotencySettings
from infrastructure.configuration.integrations import ResendSettings, TwilioSettings
from infrastructure.resilience import circuit_breaker


@pytest.fixture(autouse=True)
def clear_circuit_breaker_registry():
    """Keep the module-level breaker registry isolated between tests."""
    circuit_breaker._circuit_breaker_registry.clear()
    yield
    circuit_breaker._circuit_breaker_registry.clear()


@pytest.fixture
def settings_factory():
    """Factory for Settings with in-memory backends and dummy vendor creds.

    Example:
        settings = settings_factory(NOTIFICATION_SMS_MAX_LENGTH=20)
    """

    def _factory(**notification_overrides) -> Settings:
        notification_values = {"NOTIFICATION_STORE_BACKEND": "memory"}
        notification_values.update(notification_overrides)
        return Settings(
            notifications=NotificationSettings(**notification_values),
            idempotency=IdempotencySettings(IDEMPOTENCY_BACKEND="memory"),
            resend=ResendSettings(
                RESEND_API_KEY="re_test",
                RESEND_FROM_ADDRESS="Care Team <care@example.com>",
            ),
            twilio=TwilioSettings(
                TWILIO_ACCOUNT_SID="AC123",
                TWILIO_AUTH_TOKEN="secret",
                TWILIO_PHONE_NUMBER="+15550000000",
                TWILIO_WHATSAPP_NUMBER="+15550000001",
            ),
        )

    return _factory


@pytest.fixture
def settings(settings_factory):
    return settings_factory()
