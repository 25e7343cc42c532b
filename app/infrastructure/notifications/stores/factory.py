"""Factory for creating notification stores based on configuration."""

from typing import Optional, TYPE_CHECKING

import structlog

from infrastructure.clients.aws import DynamoDBClient
from infrastructure.notifications.stores.channels import (
    ChannelStore,
    InMemoryChannelStore,
)
from infrastructure.notifications.stores.delivery_log import (
    DeliveryLogStore,
    InMemoryDeliveryLogStore,
)
from infrastructure.notifications.stores.dynamodb_channels import DynamoDBChannelStore
from infrastructure.notifications.stores.dynamodb_delivery_log import (
    DynamoDBDeliveryLogStore,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()


def create_channel_store(
    settings: "Settings",
    backend: Optional[str] = None,
    dynamodb_client: Optional[DynamoDBClient] = None,
) -> ChannelStore:
    """Create the channel store for the configured backend.

    Args:
        settings: Application settings
        backend: Optional override (memory, dynamodb). Defaults to
            settings.notifications.backend
        dynamodb_client: Optional shared DynamoDB client

    Raises:
        ValueError: If unknown backend specified
    """
    backend = backend or settings.notifications.backend

    if backend == "memory":
        logger.info("creating_in_memory_channel_store")
        return InMemoryChannelStore()

    if backend == "dynamodb":
        return DynamoDBChannelStore(
            client=dynamodb_client or DynamoDBClient(settings.aws),
            table_name=settings.notifications.channels_table,
        )

    raise ValueError(
        f"Unknown notification store backend: {backend}. Supported: memory, dynamodb"
    )


def create_delivery_log_store(
    settings: "Settings",
    backend: Optional[str] = None,
    dynamodb_client: Optional[DynamoDBClient] = None,
) -> DeliveryLogStore:
    """Create the delivery log store for the configured backend.

    Raises:
        ValueError: If unknown backend specified
    """
    backend = backend or settings.notifications.backend

    if backend == "memory":
        logger.info("creating_in_memory_delivery_log_store")
        return InMemoryDeliveryLogStore()

    if backend == "dynamodb":
        return DynamoDBDeliveryLogStore(
            client=dynamodb_client or DynamoDBClient(settings.aws),
            table_name=settings.notifications.delivery_table,
        )

    raise ValueError(
        f"Unknown notification store backend: {backend}. Supported: memory, dynamodb"
    )
