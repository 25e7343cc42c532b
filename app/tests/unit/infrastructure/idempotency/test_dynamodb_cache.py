"""Unit tests for DynamoDBCache and the cache factory."""

import json
import time
from unittest.mock import MagicMock

import pytest

from infrastructure.clients.aws import DynamoDBClient
from infrastructure.configuration.infrastructure import IdempotencySettings
from infrastructure.idempotency import (
    DynamoDBCache,
    InMemoryCache,
    create_idempotency_cache,
)
from infrastructure.operations import OperationResult


@pytest.fixture
def dynamodb_client():
    return MagicMock(spec=DynamoDBClient)


@pytest.mark.unit
class TestDynamoDBCache:
    def test_get_hit(self, dynamodb_client):
        dynamodb_client.get_item.return_value = OperationResult.success(
            data={
                "Item": {
                    "response_json": {"S": json.dumps({"success": True})},
                    "ttl": {"N": str(int(time.time()) + 600)},
                }
            }
        )
        cache = DynamoDBCache(dynamodb_client, "idempotency", ttl_seconds=3600)

        assert cache.get("k") == {"success": True}

    def test_expired_item_is_a_miss(self, dynamodb_client):
        dynamodb_client.get_item.return_value = OperationResult.success(
            data={
                "Item": {
                    "response_json": {"S": "{}"},
                    "ttl": {"N": str(int(time.time()) - 1)},
                }
            }
        )
        cache = DynamoDBCache(dynamodb_client, "idempotency", ttl_seconds=3600)

        assert cache.get("k") is None

    def test_read_failure_is_a_miss(self, dynamodb_client):
        dynamodb_client.get_item.return_value = OperationResult.transient_error("down")
        cache = DynamoDBCache(dynamodb_client, "idempotency", ttl_seconds=3600)

        assert cache.get("k") is None

    def test_set_writes_ttl(self, dynamodb_client):
        dynamodb_client.put_item.return_value = OperationResult.success()
        cache = DynamoDBCache(dynamodb_client, "idempotency", ttl_seconds=3600)

        cache.set("k", {"success": True}, ttl_seconds=60)

        table, = dynamodb_client.put_item.call_args.args
        item = dynamodb_client.put_item.call_args.kwargs["Item"]
        assert table == "idempotency"
        assert item["idempotency_key"] == {"S": "k"}
        assert json.loads(item["response_json"]["S"]) == {"success": True}
        assert int(item["ttl"]["N"]) - int(item["created_at"]["N"]) == 60


@pytest.mark.unit
class TestCreateIdempotencyCache:
    def test_memory(self, settings):
        assert isinstance(create_idempotency_cache(settings), InMemoryCache)

    def test_dynamodb(self, settings, dynamodb_client):
        settings.idempotency = IdempotencySettings(
            IDEMPOTENCY_BACKEND="dynamodb", IDEMPOTENCY_TABLE="idem"
        )

        cache = create_idempotency_cache(settings, dynamodb_client=dynamodb_client)

        assert isinstance(cache, DynamoDBCache)
        assert cache.table_name == "idem"
        assert cache.client is dynamodb_client
