"""Infrastructure idempotency cache.

Prevents duplicate notification sends when a caller retries a request with
the same idempotency key. Backed by memory (single process, tests) or a
shared DynamoDB table.

Usage:

    from infrastructure.idempotency import create_idempotency_cache

    cache = create_idempotency_cache(settings)

    cached = cache.get(idempotency_key)
    if cached:
        return cached

    cache.set(idempotency_key, response, ttl_seconds=3600)
"""

from infrastructure.idempotency.cache import IdempotencyCache
from infrastructure.idempotency.dynamodb import DynamoDBCache
from infrastructure.idempotency.factory import create_idempotency_cache
from infrastructure.idempotency.key_builder import IdempotencyKeyBuilder
from infrastructure.idempotency.memory import InMemoryCache

__all__ = [
    "IdempotencyCache",
    "InMemoryCache",
    "DynamoDBCache",
    "IdempotencyKeyBuilder",
    "create_idempotency_cache",
]
