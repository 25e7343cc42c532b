"""Channel storage.

Protocol for the table holding users' contact channels plus an in-memory
implementation. Channels are never deleted; deactivation is a write.
"""

import threading
from typing import Dict, List, Optional, Protocol

import structlog

from infrastructure.notifications.models import NotificationChannel

logger = structlog.get_logger()


class ChannelStore(Protocol):
    """Storage interface for NotificationChannel rows.

    Methods:
        list_for_user: All channels of a user, in insertion order
        get: One channel by id
        save: Insert or replace a channel

    Implementations raise ChannelLookupError when a read fails and
    ChannelStoreError when a write fails.
    """

    def list_for_user(self, user_id: str) -> List[NotificationChannel]: ...

    def get(self, user_id: str, channel_id: str) -> Optional[NotificationChannel]: ...

    def save(self, channel: NotificationChannel) -> None: ...


class InMemoryChannelStore:
    """Thread-safe in-memory channel store."""

    def __init__(self) -> None:
        self._channels: Dict[str, Dict[str, NotificationChannel]] = {}
        self._lock = threading.Lock()
        logger.info("in_memory_channel_store_initialized")

    def list_for_user(self, user_id: str) -> List[NotificationChannel]:
        with self._lock:
            channels = list(self._channels.get(user_id, {}).values())
        return sorted(channels, key=lambda c: c.created_at)

    def get(self, user_id: str, channel_id: str) -> Optional[NotificationChannel]:
        with self._lock:
            return self._channels.get(user_id, {}).get(channel_id)

    def save(self, channel: NotificationChannel) -> None:
        with self._lock:
            self._channels.setdefault(channel.user_id, {})[channel.channel_id] = channel
