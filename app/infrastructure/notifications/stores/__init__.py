"""Channel and delivery log storage backends."""

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
from infrastructure.notifications.stores.factory import (
    create_channel_store,
    create_delivery_log_store,
)

__all__ = [
    "ChannelStore",
    "InMemoryChannelStore",
    "DynamoDBChannelStore",
    "DeliveryLogStore",
    "InMemoryDeliveryLogStore",
    "DynamoDBDeliveryLogStore",
    "create_channel_store",
    "create_delivery_log_store",
]
