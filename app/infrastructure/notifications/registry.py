"""Channel registry.

Answers "where can this user be reached, and in what order" and owns the
channel lifecycle: add, verify, promote to primary, deactivate.

Attempt order:
1. verified channels only
2. the primary channel first
3. the rest in stable insertion order
4. repeated (channel_type, channel_value) pairs collapse to the first one
"""

from typing import List, Set, Tuple

import structlog

from infrastructure.notifications.exceptions import (
    ChannelLookupError,
    ChannelNotFoundError,
)
from infrastructure.notifications.models import ChannelType, NotificationChannel
from infrastructure.notifications.stores.channels import ChannelStore

logger = structlog.get_logger()


def order_channels(channels: List[NotificationChannel]) -> List[NotificationChannel]:
    """Filter and order channels for delivery.

    Args:
        channels: A user's channels in insertion order

    Returns:
        Verified, de-duplicated channels with the primary first
    """
    # sorted() is stable, so insertion order survives within each group
    ordered = sorted(
        (c for c in channels if c.is_verified), key=lambda c: not c.is_primary
    )

    seen: Set[Tuple[ChannelType, str]] = set()
    unique: List[NotificationChannel] = []
    for channel in ordered:
        if channel.dedupe_key in seen:
            continue
        seen.add(channel.dedupe_key)
        unique.append(channel)
    return unique


class ChannelRegistry:
    """Resolve and manage a user's notification channels.

    Args:
        store: ChannelStore backend

    Example:
        registry = ChannelRegistry(InMemoryChannelStore())
        registry.add_channel("user-1", ChannelType.EMAIL, "a@example.com")
        channels = registry.resolve_channels("user-1")
    """

    def __init__(self, store: ChannelStore):
        self._store = store

    def resolve_channels(self, user_id: str) -> List[NotificationChannel]:
        """Return the user's verified channels in attempt order.

        An empty list means nothing is verified; that is not an error.

        Raises:
            ChannelLookupError: The channel store could not be read
        """
        channels = self._load(user_id)
        resolved = order_channels(channels)
        logger.debug(
            "channels_resolved",
            user_id=user_id,
            total=len(channels),
            resolved=[c.channel_type.value for c in resolved],
        )
        return resolved

    def list_channels(self, user_id: str) -> List[NotificationChannel]:
        """All channels for a user, verified or not, in insertion order."""
        return self._load(user_id)

    def add_channel(
        self,
        user_id: str,
        channel_type: ChannelType,
        channel_value: str,
        is_verified: bool = False,
    ) -> NotificationChannel:
        """Register a contact method.

        The user's first channel becomes primary. Adding a destination the
        user already has returns the existing channel unchanged.

        Raises:
            ValueError: channel_value is not valid for channel_type
        """
        candidate = NotificationChannel(
            user_id=user_id,
            channel_type=channel_type,
            channel_value=channel_value,
            is_verified=is_verified,
        )
        existing = self._load(user_id)
        for channel in existing:
            if channel.dedupe_key == candidate.dedupe_key:
                logger.info(
                    "channel_already_registered",
                    user_id=user_id,
                    channel_id=channel.channel_id,
                    channel_type=channel_type.value,
                )
                return channel

        channel = candidate.model_copy(update={"is_primary": not existing})
        self._store.save(channel)
        logger.info(
            "channel_added",
            user_id=user_id,
            channel_id=channel.channel_id,
            channel_type=channel_type.value,
            is_primary=channel.is_primary,
        )
        return channel

    def verify_channel(self, user_id: str, channel_id: str) -> NotificationChannel:
        """Mark a channel as verified after the user confirms ownership."""
        channel = self._get(user_id, channel_id)
        if channel.is_verified:
            return channel
        channel = channel.model_copy(update={"is_verified": True})
        self._store.save(channel)
        logger.info("channel_verified", user_id=user_id, channel_id=channel_id)
        return channel

    def set_primary(self, user_id: str, channel_id: str) -> NotificationChannel:
        """Make one verified channel primary and clear the flag on all others.

        Raises:
            ChannelNotFoundError: Unknown channel
            ValueError: The channel is unverified or deactivated
        """
        target = self._get(user_id, channel_id)
        if not target.is_verified:
            raise ValueError(f"Channel {channel_id} must be verified before it can be primary")
        for channel in self._load(user_id):
            if channel.channel_id != channel_id and channel.is_primary:
                self._store.save(channel.model_copy(update={"is_primary": False}))

        target = target.model_copy(update={"is_primary": True})
        self._store.save(target)
        logger.info("channel_set_primary", user_id=user_id, channel_id=channel_id)
        return target

    def deactivate_channel(self, user_id: str, channel_id: str) -> NotificationChannel:
        """Withdraw a channel from delivery without deleting it."""
        channel = self._get(user_id, channel_id)
        channel = channel.model_copy(update={"is_verified": False, "is_primary": False})
        self._store.save(channel)
        logger.info("channel_deactivated", user_id=user_id, channel_id=channel_id)
        return channel

    def _get(self, user_id: str, channel_id: str) -> NotificationChannel:
        channel = self._store.get(user_id, channel_id)
        if channel is None:
            raise ChannelNotFoundError(user_id, channel_id)
        return channel

    def _load(self, user_id: str) -> List[NotificationChannel]:
        try:
            return self._store.list_for_user(user_id)
        except ChannelLookupError:
            raise
        except Exception as e:
            logger.error(
                "channel_lookup_failed", user_id=user_id, error=str(e), exc_info=True
            )
            raise ChannelLookupError(
                f"Failed to load channels for user {user_id}: {e}"
            ) from e
