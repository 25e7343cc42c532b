"""Context variables carried on every log line.

The HTTP middleware binds a correlation id per request and the dispatcher
binds the user and notification type per delivery, so sender, breaker and
store logs can be joined back to the request that caused them without
passing ids through every call.
"""

import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import structlog

CORRELATION_KEY = "correlation_id"


@contextmanager
def _bound(context: Dict[str, Any]) -> Iterator[None]:
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context)


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Iterator[str]:
    """Bind request-scoped values for the duration of the block.

    A correlation id is generated when the caller did not send one. The
    block receives the id actually bound.

    Example:
        with bind_request_context(
            correlation_id=request.headers.get("X-Correlation-ID"),
            request_path=request.url.path,
        ) as correlation_id:
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
    """
    context: Dict[str, Any] = {CORRELATION_KEY: correlation_id or str(uuid.uuid4())}
    optional = {
        "user_id": user_id,
        "request_path": request_path,
        "request_method": request_method,
    }
    context.update({k: v for k, v in optional.items() if v is not None})
    context.update(extra_context)

    with _bound(context):
        yield context[CORRELATION_KEY]


@contextmanager
def bind_delivery_context(user_id: str, notification_type: str) -> Iterator[None]:
    """Bind the recipient and notification type while one delivery runs."""
    with _bound({"user_id": user_id, "notification_type": notification_type}):
        yield


def get_correlation_id() -> Optional[str]:
    return structlog.contextvars.get_contextvars().get(CORRELATION_KEY)


def set_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(**{CORRELATION_KEY: correlation_id})


def clear_request_context() -> None:
    """Drop every bound value. Used between requests and in tests."""
    structlog.contextvars.clear_contextvars()
