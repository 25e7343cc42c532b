"""Infrastructure configuration module - public API.

Centralized configuration for the notification engine using Pydantic
BaseSettings with domain-based organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    NotificationSettings: Delivery settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    timeout = settings.notifications.transport_timeout_seconds
    sender = settings.twilio.TWILIO_PHONE_NUMBER
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.features.notifications import NotificationSettings

__all__ = ["Settings", "NotificationSettings"]
