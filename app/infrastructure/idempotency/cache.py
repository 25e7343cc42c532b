"""Idempotency cache interface.

A delivered notification's DeliveryResult is stored under a key derived
from the caller's idempotency key. A retried request finds it and gets the
same result back instead of a second message on the user's phone.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IdempotencyCache(ABC):
    """Key/value store of JSON-ready results with per-entry expiry."""

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored result, or None when absent or expired."""

    @abstractmethod
    def set(self, key: str, response: Dict[str, Any], ttl_seconds: int) -> None:
        """Store ``response`` for ``ttl_seconds``."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry. Backends with native TTL may only log."""

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Backend name plus whatever counters the backend keeps."""
