"""OperationResult: the return type of every vendor and storage call.

Senders never raise for delivery problems. A rejected destination, an
expired API key and a vendor outage all come back as an OperationResult
whose status tells the dispatcher (and the circuit breaker) what happened.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from infrastructure.operations.status import OperationStatus


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one call.

    Attributes:
        status: What kind of outcome this is
        message: Text for logs and for DeliveryAttempt.error
        data: Payload on success (vendor message id, raw DynamoDB response)
        error_code: Machine code such as ``HTTP_503`` or ``TIMEOUT``
        retry_after: Seconds the vendor asked us to wait, when rate limited
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_retryable(self) -> bool:
        return self.status.is_retryable

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        return cls(
            status=status,
            message=message,
            data=data,
            error_code=error_code,
            retry_after=retry_after,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Timeouts, connection resets, throttling, vendor 5xx."""
        return cls.error(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Bad destination, rejected payload, missing configuration."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data
