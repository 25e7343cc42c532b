"""Twilio SMS/WhatsApp integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class TwilioSettings(IntegrationSettings):
    """Twilio Messages API configuration.

    The same account carries both SMS and WhatsApp traffic. WhatsApp
    messages go out from ``TWILIO_WHATSAPP_NUMBER`` when set, otherwise from
    ``TWILIO_PHONE_NUMBER``.

    Environment Variables:
        TWILIO_ACCOUNT_SID: Twilio account SID
        TWILIO_AUTH_TOKEN: Twilio auth token
        TWILIO_PHONE_NUMBER: E.164 sender number for SMS
        TWILIO_WHATSAPP_NUMBER: E.164 sender number for WhatsApp
        TWILIO_API_URL: Twilio REST API base URL

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        sid = settings.twilio.TWILIO_ACCOUNT_SID
        ```
    """

    TWILIO_ACCOUNT_SID: str | None = Field(default=None, alias="TWILIO_ACCOUNT_SID")
    TWILIO_AUTH_TOKEN: str | None = Field(default=None, alias="TWILIO_AUTH_TOKEN")
    TWILIO_PHONE_NUMBER: str | None = Field(default=None, alias="TWILIO_PHONE_NUMBER")
    TWILIO_WHATSAPP_NUMBER: str | None = Field(
        default=None, alias="TWILIO_WHATSAPP_NUMBER"
    )
    TWILIO_API_URL: str = Field(
        default="https://api.twilio.com/2010-04-01", alias="TWILIO_API_URL"
    )

    @property
    def is_configured(self) -> bool:
        return bool(
            self.TWILIO_ACCOUNT_SID
            and self.TWILIO_AUTH_TOKEN
            and self.TWILIO_PHONE_NUMBER
        )

    @property
    def whatsapp_sender(self) -> str | None:
        return self.TWILIO_WHATSAPP_NUMBER or self.TWILIO_PHONE_NUMBER
