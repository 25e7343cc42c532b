"""Test fixtures for notification infrastructure tests."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest

from infrastructure.notifications.models import (
    ChannelType,
    NotificationChannel,
    NotificationRequest,
)
from infrastructure.notifications.senders.base import ChannelSender
from infrastructure.notifications.stores.channels import InMemoryChannelStore
from infrastructure.notifications.stores.delivery_log import InMemoryDeliveryLogStore
from infrastructure.notifications.registry import ChannelRegistry
from infrastructure.operations import OperationResult

BASE_TIME = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)

DEFAULT_VALUES = {
    ChannelType.EMAIL: "patient@example.com",
    ChannelType.SMS: "+15551234567",
    ChannelType.WHATSAPP: "+15557654321",
}


@pytest.fixture
def channel_factory():
    """Factory for NotificationChannel instances.

    Each call gets a created_at one minute after the previous one, so
    insertion order is deterministic.

    Example:
        primary = channel_factory(ChannelType.SMS, is_primary=True)
    """
    counter = {"n": 0}

    def _factory(
        channel_type: ChannelType = ChannelType.EMAIL,
        channel_value: Optional[str] = None,
        user_id: str = "user-1",
        is_verified: bool = True,
        is_primary: bool = False,
        channel_id: Optional[str] = None,
    ) -> NotificationChannel:
        counter["n"] += 1
        values: Dict[str, Any] = dict(
            user_id=user_id,
            channel_type=channel_type,
            channel_value=channel_value or DEFAULT_VALUES[channel_type],
            is_verified=is_verified,
            is_primary=is_primary,
            created_at=BASE_TIME + timedelta(minutes=counter["n"]),
        )
        if channel_id:
            values["channel_id"] = channel_id
        return NotificationChannel(**values)

    return _factory


@pytest.fixture
def request_factory():
    """Factory for NotificationRequest instances."""

    def _factory(
        user_id: str = "user-1",
        subject: str = "Insurance verification",
        message: str = "Your insurance expires in 7 days.",
        notification_type: str = "insurance_reminder",
        metadata: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> NotificationRequest:
        return NotificationRequest(
            user_id=user_id,
            subject=subject,
            message=message,
            notification_type=notification_type,
            metadata=metadata or {},
            idempotency_key=idempotency_key,
        )

    return _factory


@pytest.fixture
def sender_factory():
    """Factory for mock senders.

    Example:
        failing = sender_factory(ChannelType.SMS, succeed=False)
        raising = sender_factory(ChannelType.EMAIL, raises=RuntimeError("boom"))
    """

    def _factory(
        channel_type: ChannelType,
        succeed: bool = True,
        raises: Optional[Exception] = None,
        external_id: str = "msg-1",
    ) -> MagicMock:
        sender = MagicMock(spec=ChannelSender)
        sender.channel_type = channel_type
        if raises is not None:
            sender.send.side_effect = raises
        elif succeed:
            sender.send.return_value = OperationResult.success(
                data={"external_id": external_id}
            )
        else:
            sender.send.return_value = OperationResult.transient_error(
                f"{channel_type.value} vendor unavailable", error_code="HTTP_503"
            )
        sender.health_check.return_value = OperationResult.success()
        return sender

    return _factory


@pytest.fixture
def channel_store():
    return InMemoryChannelStore()


@pytest.fixture
def registry(channel_store):
    return ChannelRegistry(channel_store)


@pytest.fixture
def delivery_log():
    return InMemoryDeliveryLogStore()


@pytest.fixture
def fixed_clock():
    """Clock that advances one second per call."""
    state = {"now": BASE_TIME}

    def _clock() -> datetime:
        state["now"] = state["now"] + timedelta(seconds=1)
        return state["now"]

    return _clock
