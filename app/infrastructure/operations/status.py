"""Operation status enumeration.

Status codes shared by vendor clients, senders and stores so that callers can
tell a retryable failure from a terminal one without inspecting exceptions.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Retryable error (network, timeout, rate limit, 5xx)
        PERMANENT_ERROR: Non-retryable error (validation, bad destination)
        UNAUTHORIZED: Vendor rejected our credentials
        NOT_FOUND: Resource not found
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"

    @property
    def is_retryable(self) -> bool:
        return self is OperationStatus.TRANSIENT_ERROR
