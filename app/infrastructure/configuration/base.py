"""Base classes for the settings sections.

Every section reads the process environment and ``.env`` with exact-case
variable names and ignores variables it does not declare, so one ``.env``
can hold the vendor credentials, the delivery tuning and the server knobs
side by side.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Vendor and cloud credentials (Twilio, Resend, AWS)."""

    model_config = ENV_CONFIG


class FeatureSettings(BaseSettings):
    """Delivery behaviour: store backend, timeouts, breaker thresholds."""

    model_config = ENV_CONFIG


class InfrastructureSettings(BaseSettings):
    """Process-level concerns: idempotency cache, HTTP server."""

    model_config = ENV_CONFIG
