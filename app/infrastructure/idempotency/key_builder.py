"""Deterministic storage keys."""

import hashlib
import json
from typing import Any

DIGEST_LENGTH = 16


class IdempotencyKeyBuilder:
    """Build ``namespace:operation:digest`` keys from keyword components.

    Components are serialized as sorted JSON before hashing, so keyword order
    never changes the key and caller-supplied values (user ids, idempotency
    keys) never appear in storage keys in clear text.

    Example:
        >>> keys = IdempotencyKeyBuilder(namespace="notification_delivery")
        >>> keys.build(
        ...     "record",
        ...     user_id="user-1",
        ...     notification_type="insurance_reminder",
        ...     created_at="2026-01-01T00:00:00+00:00",
        ... )
        'notification_delivery:record:<16 hex chars>'
    """

    def __init__(self, namespace: str):
        self.namespace = namespace

    def build(self, operation: str, **components: Any) -> str:
        canonical = json.dumps(
            {"ns": self.namespace, "op": operation, "parts": components},
            sort_keys=True,
            separators=(",", ":"),
            default=str,
        )
        digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
        return f"{self.namespace}:{operation}:{digest[:DIGEST_LENGTH]}"
