"""DynamoDB idempotency cache implementation."""

import json
import time
from typing import Any, Dict, Optional

import structlog

from infrastructure.clients.aws import DynamoDBClient
from infrastructure.idempotency.cache import IdempotencyCache

logger = structlog.get_logger()

PARTITION_KEY = "idempotency_key"


class DynamoDBCache(IdempotencyCache):
    """DynamoDB-backed idempotency cache.

    Table layout:
    - PK: idempotency_key (string)
    - Attributes: response_json, ttl (for DynamoDB TTL), created_at

    Suitable for multi-instance deployments where the cache must be shared.
    Expired items are filtered on read because DynamoDB TTL deletion is lazy.
    """

    def __init__(self, client: DynamoDBClient, table_name: str, ttl_seconds: int):
        self.client = client
        self.table_name = table_name
        self.ttl_seconds = ttl_seconds
        logger.info(
            "initialized_dynamodb_idempotency_cache",
            table_name=table_name,
            ttl_seconds=ttl_seconds,
        )

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        result = self.client.get_item(
            self.table_name, Key={PARTITION_KEY: {"S": key}}
        )
        if not result.is_success:
            logger.warning(
                "idempotency_cache_get_failed", key=key, error=result.message
            )
            return None

        item = (result.data or {}).get("Item")
        if not item:
            logger.debug("idempotency_cache_miss", key=key)
            return None

        ttl_attr = item.get("ttl", {}).get("N")
        if ttl_attr and int(ttl_attr) <= int(time.time()):
            logger.debug("idempotency_cache_expired", key=key)
            return None

        try:
            return json.loads(item["response_json"]["S"])
        except (KeyError, TypeError, ValueError) as e:
            logger.error("idempotency_cache_decode_error", key=key, error=str(e))
            return None

    def set(
        self, key: str, response: Dict[str, Any], ttl_seconds: Optional[int] = None
    ) -> None:
        if ttl_seconds is None:
            ttl_seconds = self.ttl_seconds

        now = int(time.time())
        try:
            response_json = json.dumps(response)
        except (TypeError, ValueError) as e:
            logger.error(
                "idempotency_cache_serialization_error", key=key, error=str(e)
            )
            return

        result = self.client.put_item(
            self.table_name,
            Item={
                PARTITION_KEY: {"S": key},
                "response_json": {"S": response_json},
                "ttl": {"N": str(now + ttl_seconds)},
                "created_at": {"N": str(now)},
            },
        )
        if not result.is_success:
            logger.error("idempotency_cache_set_failed", key=key, error=result.message)

    def clear(self) -> None:
        # TTL handles expiry in DynamoDB; a table scan-and-delete is not worth it.
        logger.warning("idempotency_cache_clear_ignored", backend="dynamodb")

    def get_stats(self) -> Dict[str, Any]:
        return {
            "backend": "dynamodb",
            "table_name": self.table_name,
            "ttl_seconds": self.ttl_seconds,
            "partition_key": PARTITION_KEY,
        }
