"""Map vendor HTTP failures to OperationResult.

The Twilio and Resend clients both go through these two functions, so a
Twilio 503 and a Resend 503 look the same to the dispatcher and to the
circuit breaker.
"""

from typing import Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

DEFAULT_RETRY_AFTER_SECONDS = 60


def _retry_after_seconds(header: Optional[str]) -> int:
    try:
        return int(header) if header else DEFAULT_RETRY_AFTER_SECONDS
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


def classify_http_status(
    status_code: int,
    provider: str,
    detail: str = "",
    retry_after: Optional[str] = None,
) -> OperationResult:
    """Turn a non-2xx vendor response into a failed OperationResult.

    429 and 5xx are transient, 401/403 unauthorized, 404 not found and any
    other 4xx permanent. ``retry_after`` is the raw Retry-After header.
    """
    suffix = f": {detail}" if detail else ""

    if status_code == 429:
        return OperationResult.transient_error(
            f"{provider} rate limited{suffix}",
            error_code="RATE_LIMITED",
            retry_after=_retry_after_seconds(retry_after),
        )
    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"{provider} rejected credentials ({status_code}){suffix}",
            error_code="UNAUTHORIZED",
        )
    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            f"{provider} resource not found{suffix}",
            error_code="NOT_FOUND",
        )

    kind = "server" if status_code >= 500 else "client"
    message = f"{provider} {kind} error ({status_code}){suffix}"
    if kind == "server":
        return OperationResult.transient_error(message, error_code=f"HTTP_{status_code}")
    return OperationResult.permanent_error(message, error_code=f"HTTP_{status_code}")


def classify_http_error(exc: Exception, provider: str = "http") -> OperationResult:
    """Classify an exception raised by ``requests``.

    Example:
        try:
            response = session.post(url, data=form, timeout=timeout)
        except requests.RequestException as e:
            return classify_http_error(e, provider="twilio")
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"{provider} request timed out: {exc}", error_code="TIMEOUT"
        )

    response = getattr(exc, "response", None)
    if isinstance(exc, requests.HTTPError) and response is not None:
        return classify_http_status(
            response.status_code,
            provider,
            detail=str(exc),
            retry_after=response.headers.get("Retry-After"),
        )

    return OperationResult.transient_error(
        f"{provider} connection error: {type(exc).__name__}: {exc}",
        error_code="CONNECTION_ERROR",
    )
