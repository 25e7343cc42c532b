"""Delivery log storage.

Append-only storage for DeliveryRecords. ``record`` is idempotent on the
record's deterministic key: writing the same record twice leaves one entry
and reports ``created=False`` the second time.
"""

import threading
from typing import Dict, List, Optional, Protocol

import structlog

from infrastructure.notifications.models import DeliveryRecord
from infrastructure.operations import OperationResult

logger = structlog.get_logger()


class DeliveryLogStore(Protocol):
    """Storage interface for delivery records.

    Methods:
        record: Persist a record; ``data={"created": bool}`` on success
        get: Fetch one record by key
        list_for_user: Newest-first records for a user

    Reads raise DeliveryLogReadError when the backend is unavailable, so an
    outage is never mistaken for an empty history.
    """

    def record(self, record: DeliveryRecord) -> OperationResult: ...

    def get(self, record_key: str) -> Optional[DeliveryRecord]: ...

    def list_for_user(self, user_id: str, limit: int = 50) -> List[DeliveryRecord]: ...


class InMemoryDeliveryLogStore:
    """Thread-safe in-memory delivery log."""

    def __init__(self) -> None:
        self._records: Dict[str, DeliveryRecord] = {}
        self._lock = threading.Lock()
        logger.info("in_memory_delivery_log_initialized")

    def record(self, record: DeliveryRecord) -> OperationResult:
        key = record.record_key
        with self._lock:
            if key in self._records:
                logger.info("delivery_record_already_exists", record_key=key)
                return OperationResult.success(
                    data={"created": False, "record_key": key},
                    message="Delivery record already persisted",
                )
            self._records[key] = record
        return OperationResult.success(
            data={"created": True, "record_key": key},
            message="Delivery record persisted",
        )

    def get(self, record_key: str) -> Optional[DeliveryRecord]:
        with self._lock:
            return self._records.get(record_key)

    def list_for_user(self, user_id: str, limit: int = 50) -> List[DeliveryRecord]:
        with self._lock:
            records = [r for r in self._records.values() if r.user_id == user_id]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit]
