"""Notification delivery feature settings."""

from typing import Literal

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class NotificationSettings(FeatureSettings):
    """Multi-channel notification delivery configuration.

    Environment Variables:
        NOTIFICATION_STORE_BACKEND: "memory" or "dynamodb" (default: memory)
        NOTIFICATION_CHANNELS_TABLE: DynamoDB table holding user channels
        NOTIFICATION_DELIVERY_TABLE: DynamoDB table holding delivery records
        NOTIFICATION_TRANSPORT_TIMEOUT_SECONDS: Vendor HTTP timeout (default: 10)
        NOTIFICATION_SMS_MAX_LENGTH: Body truncation limit for SMS/WhatsApp
        NOTIFICATION_CIRCUIT_FAILURE_THRESHOLD: Failures before a sender's
            breaker opens
        NOTIFICATION_CIRCUIT_TIMEOUT_SECONDS: Seconds a breaker stays open
        NOTIFICATION_DELIVERY_LIST_LIMIT: Max records returned by the audit API

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.notifications.backend == "dynamodb":
            table = settings.notifications.delivery_table
        ```
    """

    backend: Literal["memory", "dynamodb"] = Field(
        default="memory", alias="NOTIFICATION_STORE_BACKEND"
    )
    channels_table: str = Field(
        default="notification_channels", alias="NOTIFICATION_CHANNELS_TABLE"
    )
    delivery_table: str = Field(
        default="notification_delivery", alias="NOTIFICATION_DELIVERY_TABLE"
    )
    transport_timeout_seconds: float = Field(
        default=10.0, alias="NOTIFICATION_TRANSPORT_TIMEOUT_SECONDS"
    )
    sms_max_length: int = Field(default=1600, alias="NOTIFICATION_SMS_MAX_LENGTH")
    circuit_breaker_enabled: bool = Field(
        default=True, alias="NOTIFICATION_CIRCUIT_BREAKER_ENABLED"
    )
    circuit_failure_threshold: int = Field(
        default=5, alias="NOTIFICATION_CIRCUIT_FAILURE_THRESHOLD"
    )
    circuit_timeout_seconds: int = Field(
        default=60, alias="NOTIFICATION_CIRCUIT_TIMEOUT_SECONDS"
    )
    delivery_list_limit: int = Field(
        default=50, alias="NOTIFICATION_DELIVERY_LIST_LIMIT"
    )
