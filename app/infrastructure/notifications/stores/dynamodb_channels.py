"""DynamoDB-backed channel store.

Table Schema:
    PK: user_id (String)
    SK: channel_id (String)
    Attributes: channel_type, channel_value, is_verified, is_primary, created_at
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from infrastructure.clients.aws import DynamoDBClient
from infrastructure.notifications.exceptions import (
    ChannelLookupError,
    ChannelStoreError,
)
from infrastructure.notifications.models import ChannelType, NotificationChannel

logger = structlog.get_logger()


class DynamoDBChannelStore:
    """Channel store backed by a DynamoDB table.

    Args:
        client: DynamoDBClient
        table_name: Channel table name
    """

    def __init__(self, client: DynamoDBClient, table_name: str):
        self.client = client
        self.table_name = table_name
        logger.info("dynamodb_channel_store_initialized", table_name=table_name)

    def list_for_user(self, user_id: str) -> List[NotificationChannel]:
        channels: List[NotificationChannel] = []
        query_kwargs: Dict[str, Any] = {
            "ExpressionAttributeValues": {":uid": {"S": user_id}},
        }

        while True:
            result = self.client.query(
                self.table_name, KeyConditionExpression="user_id = :uid", **query_kwargs
            )
            if not result.is_success:
                logger.error(
                    "channel_store_query_failed",
                    user_id=user_id,
                    error=result.message,
                    error_code=result.error_code,
                )
                raise ChannelLookupError(
                    f"Failed to load channels for user {user_id}: {result.message}"
                )

            data = result.data or {}
            channels.extend(_from_item(item) for item in data.get("Items", []))

            last_key = data.get("LastEvaluatedKey")
            if not last_key:
                break
            query_kwargs["ExclusiveStartKey"] = last_key

        return sorted(channels, key=lambda c: c.created_at)

    def get(self, user_id: str, channel_id: str) -> Optional[NotificationChannel]:
        result = self.client.get_item(
            self.table_name,
            Key={"user_id": {"S": user_id}, "channel_id": {"S": channel_id}},
        )
        if not result.is_success:
            raise ChannelLookupError(
                f"Failed to load channel {channel_id}: {result.message}"
            )
        item = (result.data or {}).get("Item")
        return _from_item(item) if item else None

    def save(self, channel: NotificationChannel) -> None:
        result = self.client.put_item(self.table_name, Item=_to_item(channel))
        if not result.is_success:
            logger.error(
                "channel_store_save_failed",
                user_id=channel.user_id,
                channel_id=channel.channel_id,
                error=result.message,
            )
            raise ChannelStoreError(
                f"Failed to save channel {channel.channel_id}: {result.message}"
            )


def _to_item(channel: NotificationChannel) -> Dict[str, Any]:
    return {
        "user_id": {"S": channel.user_id},
        "channel_id": {"S": channel.channel_id},
        "channel_type": {"S": channel.channel_type.value},
        "channel_value": {"S": channel.channel_value},
        "is_verified": {"BOOL": channel.is_verified},
        "is_primary": {"BOOL": channel.is_primary},
        "created_at": {"S": channel.created_at.isoformat()},
    }


def _from_item(item: Dict[str, Any]) -> NotificationChannel:
    return NotificationChannel(
        user_id=item["user_id"]["S"],
        channel_id=item["channel_id"]["S"],
        channel_type=ChannelType(item["channel_type"]["S"]),
        channel_value=item["channel_value"]["S"],
        is_verified=item.get("is_verified", {}).get("BOOL", False),
        is_primary=item.get("is_primary", {}).get("BOOL", False),
        created_at=datetime.fromisoformat(item["created_at"]["S"]),
    )
