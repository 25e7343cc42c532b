"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.aws import AwsSettings
from infrastructure.configuration.integrations.resend import ResendSettings
from infrastructure.configuration.integrations.twilio import TwilioSettings

__all__ = [
    "AwsSettings",
    "ResendSettings",
    "TwilioSettings",
]
