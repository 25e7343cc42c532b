"""Multi-channel notification delivery.

Delivers a message to a user through their verified channels (email, SMS,
WhatsApp) with primary-first failover, and keeps an append-only record of
every delivery.

Usage:
    from infrastructure.notifications import NotificationService
    from infrastructure.services import get_settings

    service = NotificationService(get_settings())

    channel = service.add_channel("user-1", ChannelType.SMS, "+15551234567")
    service.verify_channel("user-1", channel.channel_id)

    result = service.send_notification(
        user_id="user-1",
        subject="Appointment reminder",
        message="Your session starts in 1 hour.",
        notification_type="appointment_reminder",
    )
    if not result.success:
        logger.warning("notification_failed", reason=result.failure_reason)
"""

# Models
from infrastructure.notifications.models import (
    AttemptStatus,
    ChannelType,
    DeliveryAttempt,
    DeliveryRecord,
    DeliveryResult,
    DeliveryStatus,
    FailureReason,
    NotificationChannel,
    NotificationRequest,
)

# Errors
from infrastructure.notifications.exceptions import (
    AllChannelsExhaustedError,
    ChannelLookupError,
    ChannelNotFoundError,
    ChannelStoreError,
    DeliveryLogReadError,
    NoChannelsConfiguredError,
    NotificationError,
)

# Registry and dispatcher
from infrastructure.notifications.registry import ChannelRegistry
from infrastructure.notifications.dispatcher import NotificationDispatcher

# Senders
from infrastructure.notifications.senders import (
    ChannelSender,
    EmailSender,
    SMSSender,
    WhatsAppSender,
)

# Service
from infrastructure.notifications.service import (
    NotificationService,
    build_default_senders,
)

__all__ = [
    # Models
    "AttemptStatus",
    "ChannelType",
    "DeliveryAttempt",
    "DeliveryRecord",
    "DeliveryResult",
    "DeliveryStatus",
    "FailureReason",
    "NotificationChannel",
    "NotificationRequest",
    # Errors
    "NotificationError",
    "NoChannelsConfiguredError",
    "AllChannelsExhaustedError",
    "ChannelLookupError",
    "ChannelNotFoundError",
    "ChannelStoreError",
    "DeliveryLogReadError",
    # Core
    "ChannelRegistry",
    "NotificationDispatcher",
    # Senders
    "ChannelSender",
    "EmailSender",
    "SMSSender",
    "WhatsAppSender",
    # Service
    "NotificationService",
    "build_default_senders",
]
