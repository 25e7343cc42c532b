"""Idempotency infrastructure settings."""

from typing import Literal

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class IdempotencySettings(InfrastructureSettings):
    """Idempotency cache configuration for preventing duplicate sends.

    Environment Variables:
        IDEMPOTENCY_BACKEND: "memory" or "dynamodb" (default: memory)
        IDEMPOTENCY_TABLE: DynamoDB table name for cached responses
        IDEMPOTENCY_TTL_SECONDS: Time-to-live for cache entries (default: 3600s = 1h)

    Example:
        ```python
        from infrastructure.services import get_settings

        ttl = get_settings().idempotency.IDEMPOTENCY_TTL_SECONDS
        ```
    """

    IDEMPOTENCY_BACKEND: Literal["memory", "dynamodb"] = Field(
        default="memory", alias="IDEMPOTENCY_BACKEND"
    )
    IDEMPOTENCY_TABLE: str = Field(
        default="notification_idempotency", alias="IDEMPOTENCY_TABLE"
    )
    IDEMPOTENCY_TTL_SECONDS: int = Field(default=3600, alias="IDEMPOTENCY_TTL_SECONDS")
