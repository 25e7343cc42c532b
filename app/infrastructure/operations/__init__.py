"""Operation result types and status enums.

Standardized result types shared by vendor clients, channel senders and
stores, plus classifiers that map transport exceptions onto them.
"""

from infrastructure.operations.classifiers import (
    classify_http_error,
    classify_http_status,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
    "classify_http_status",
]
