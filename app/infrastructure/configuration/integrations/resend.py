"""Resend email integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class ResendSettings(IntegrationSettings):
    """Resend transactional email API configuration.

    Environment Variables:
        RESEND_API_KEY: Resend API key
        RESEND_API_URL: Resend API base URL
        RESEND_FROM_ADDRESS: Sender address used for outgoing notifications

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        api_key = settings.resend.RESEND_API_KEY
        ```
    """

    RESEND_API_KEY: str | None = Field(default=None, alias="RESEND_API_KEY")
    RESEND_API_URL: str = Field(
        default="https://api.resend.com", alias="RESEND_API_URL"
    )
    RESEND_FROM_ADDRESS: str = Field(
        default="Notifications <notifications@example.com>",
        alias="RESEND_FROM_ADDRESS",
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.RESEND_API_KEY)
