"""In-memory idempotency cache for single-process deployments and tests."""

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

import structlog

from infrastructure.idempotency.cache import IdempotencyCache

logger = structlog.get_logger()


class InMemoryCache(IdempotencyCache):
    """Thread-safe dict-backed cache with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            expires_at, response = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                self._misses += 1
                logger.debug("idempotency_cache_expired", key=key)
                return None
            self._hits += 1
            return dict(response)

    def set(self, key: str, response: Dict[str, Any], ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + ttl_seconds, dict(response))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "backend": "memory",
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
            }
