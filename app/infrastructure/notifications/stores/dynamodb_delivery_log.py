"""DynamoDB-backed delivery log.

Table Schema:
    PK: record_key (String)
    Attributes: user_id, notification_type, delivery_status, failure_reason,
                channels_attempted (JSON), metadata (JSON), created_at
    GSI: user_id-created_at-index (user_id + created_at)
"""

import json
from typing import Any, Dict, List, Optional

import structlog

from infrastructure.clients.aws import DynamoDBClient
from infrastructure.notifications.exceptions import DeliveryLogReadError
from infrastructure.notifications.models import DeliveryRecord
from infrastructure.operations import OperationResult

logger = structlog.get_logger()

USER_INDEX = "user_id-created_at-index"


class DynamoDBDeliveryLogStore:
    """Delivery log backed by a DynamoDB table.

    Writes are conditional on the record key not existing, so a retried
    write can never create a second entry or overwrite the first.

    Args:
        client: DynamoDBClient
        table_name: Delivery table name
    """

    def __init__(self, client: DynamoDBClient, table_name: str):
        self.client = client
        self.table_name = table_name
        logger.info("dynamodb_delivery_log_initialized", table_name=table_name)

    def record(self, record: DeliveryRecord) -> OperationResult:
        key = record.record_key
        result = self.client.put_item(
            self.table_name,
            Item=_to_item(record),
            ConditionExpression="attribute_not_exists(record_key)",
            treat_conflict_as_success=True,
        )
        if not result.is_success:
            logger.error(
                "delivery_record_write_failed",
                record_key=key,
                error=result.message,
                error_code=result.error_code,
            )
            return result

        created = not (result.data or {}).get("conflict", False)
        if not created:
            logger.info("delivery_record_already_exists", record_key=key)
        return OperationResult.success(
            data={"created": created, "record_key": key},
            message="Delivery record persisted",
        )

    def get(self, record_key: str) -> Optional[DeliveryRecord]:
        result = self.client.get_item(
            self.table_name, Key={"record_key": {"S": record_key}}
        )
        if not result.is_success:
            logger.error(
                "delivery_record_read_failed", record_key=record_key, error=result.message
            )
            raise DeliveryLogReadError(
                f"Failed to load delivery record {record_key}: {result.message}"
            )
        item = (result.data or {}).get("Item")
        return _from_item(item) if item else None

    def list_for_user(self, user_id: str, limit: int = 50) -> List[DeliveryRecord]:
        result = self.client.query(
            self.table_name,
            KeyConditionExpression="user_id = :uid",
            IndexName=USER_INDEX,
            ExpressionAttributeValues={":uid": {"S": user_id}},
            ScanIndexForward=False,
            Limit=limit,
        )
        if not result.is_success:
            logger.error(
                "delivery_record_query_failed", user_id=user_id, error=result.message
            )
            raise DeliveryLogReadError(
                f"Failed to load deliveries for user {user_id}: {result.message}"
            )
        return [_from_item(item) for item in (result.data or {}).get("Items", [])]


def _to_item(record: DeliveryRecord) -> Dict[str, Any]:
    data = record.model_dump(mode="json")
    item: Dict[str, Any] = {
        "record_key": {"S": record.record_key},
        "user_id": {"S": record.user_id},
        "notification_type": {"S": record.notification_type},
        "delivery_status": {"S": data["delivery_status"]},
        "channels_attempted": {"S": json.dumps(data["channels_attempted"])},
        "metadata": {"S": json.dumps(data["metadata"])},
        "created_at": {"S": data["created_at"]},
    }
    if record.failure_reason is not None:
        item["failure_reason"] = {"S": record.failure_reason.value}
    return item


def _from_item(item: Dict[str, Any]) -> DeliveryRecord:
    return DeliveryRecord.model_validate(
        {
            "user_id": item["user_id"]["S"],
            "notification_type": item["notification_type"]["S"],
            "delivery_status": item["delivery_status"]["S"],
            "failure_reason": item.get("failure_reason", {}).get("S"),
            "channels_attempted": json.loads(item["channels_attempted"]["S"]),
            "metadata": json.loads(item.get("metadata", {}).get("S", "{}")),
            "created_at": item["created_at"]["S"],
        }
    )
