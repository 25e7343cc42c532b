"""Top-level Settings object.

Each section is its own BaseSettings reading the same environment, so a
section can be built alone in tests and handed to ``Settings(...)`` as an
override:

    settings = Settings(notifications=NotificationSettings(NOTIFICATION_SMS_MAX_LENGTH=160))

Application code goes through ``infrastructure.services.get_settings()``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from infrastructure.configuration.base import ENV_CONFIG
from infrastructure.configuration.features import NotificationSettings
from infrastructure.configuration.infrastructure import (
    IdempotencySettings,
    ServerSettings,
)
from infrastructure.configuration.integrations import (
    AwsSettings,
    ResendSettings,
    TwilioSettings,
)


class Settings(BaseSettings):
    """All configuration for the notification engine.

    Environment Variables:
        PREFIX: Deployment prefix; empty in production
        LOG_LEVEL: DEBUG, INFO, WARNING or ERROR
        GIT_SHA: Reported by /version and in every log line
    """

    model_config = ENV_CONFIG

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # vendors
    aws: AwsSettings = Field(default_factory=AwsSettings)
    resend: ResendSettings = Field(default_factory=ResendSettings)
    twilio: TwilioSettings = Field(default_factory=TwilioSettings)

    # delivery
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    # process
    idempotency: IdempotencySettings = Field(default_factory=IdempotencySettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    @property
    def is_production(self) -> bool:
        """Production deployments run without a PREFIX."""
        return not self.PREFIX
