"""structlog setup, log context and processors.

    from infrastructure.logging import get_module_logger, bind_delivery_context

    logger = get_module_logger()

    with bind_delivery_context(user_id="u-1", notification_type="appointment_reminder"):
        logger.info("channel_attempt", channel="sms")
"""

from infrastructure.logging.context import (
    bind_delivery_context,
    bind_request_context,
    clear_request_context,
    get_correlation_id,
    set_correlation_id,
)
from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    mask_destination,
    mask_sensitive_data,
    truncate_large_values,
)
from infrastructure.logging.setup import configure_logging, get_module_logger, logger

__all__ = [
    "SENSITIVE_PATTERNS",
    "add_app_info",
    "bind_delivery_context",
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
    "get_correlation_id",
    "get_module_logger",
    "logger",
    "mask_destination",
    "mask_sensitive_data",
    "set_correlation_id",
    "truncate_large_values",
]
