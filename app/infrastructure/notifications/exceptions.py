"""Notification delivery exceptions.

Sender failures are not exceptions: they come back as error
OperationResults and become failed DeliveryAttempts. These types are for
outcomes a caller has to act on.
"""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.notifications.models import DeliveryAttempt


class NotificationError(Exception):
    """Base class for notification delivery errors."""


class NoChannelsConfiguredError(NotificationError):
    """The user has no verified channel. Terminal, not retryable."""

    def __init__(self, user_id: str, message: str = "No notification channels configured"):
        super().__init__(message)
        self.user_id = user_id


class AllChannelsExhaustedError(NotificationError):
    """Every verified channel was attempted and none succeeded."""

    def __init__(
        self,
        user_id: str,
        attempts: Optional[List["DeliveryAttempt"]] = None,
        message: str = "All notification channels failed",
    ):
        super().__init__(message)
        self.user_id = user_id
        self.attempts = list(attempts or [])


class ChannelLookupError(NotificationError):
    """The channel store could not be read."""


class ChannelNotFoundError(NotificationError):
    """A management operation referenced an unknown channel."""

    def __init__(self, user_id: str, channel_id: str):
        super().__init__(f"Channel {channel_id} not found for user {user_id}")
        self.user_id = user_id
        self.channel_id = channel_id


class ChannelStoreError(NotificationError):
    """A write to the channel store failed."""


class DeliveryLogReadError(NotificationError):
    """The delivery log could not be read."""
