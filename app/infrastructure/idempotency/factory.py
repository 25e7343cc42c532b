"""Idempotency cache factory."""

from typing import Optional, TYPE_CHECKING

import structlog

from infrastructure.clients.aws import DynamoDBClient
from infrastructure.idempotency.cache import IdempotencyCache
from infrastructure.idempotency.dynamodb import DynamoDBCache
from infrastructure.idempotency.memory import InMemoryCache

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()


def create_idempotency_cache(
    settings: "Settings", dynamodb_client: Optional[DynamoDBClient] = None
) -> IdempotencyCache:
    """Build the cache selected by ``IDEMPOTENCY_BACKEND``.

    Args:
        settings: Application settings
        dynamodb_client: Optional shared DynamoDB client

    Returns:
        InMemoryCache or DynamoDBCache
    """
    backend = settings.idempotency.IDEMPOTENCY_BACKEND
    if backend == "dynamodb":
        client = dynamodb_client or DynamoDBClient(settings.aws)
        cache: IdempotencyCache = DynamoDBCache(
            client=client,
            table_name=settings.idempotency.IDEMPOTENCY_TABLE,
            ttl_seconds=settings.idempotency.IDEMPOTENCY_TTL_SECONDS,
        )
    else:
        cache = InMemoryCache()

    logger.info("initialized_idempotency_cache", backend=backend)
    return cache
