"""Structlog configuration.

One call to ``configure_logging`` at startup routes structlog through the
standard library logger. Development gets coloured console output,
production gets one JSON object per line. Destination addresses and vendor
credentials are masked before either renderer runs.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging()
    logger = get_module_logger()
    logger.info("notification_delivered", channel="sms")
"""

import inspect
import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.typing import Processor

from infrastructure.configuration import Settings
from infrastructure.logging.formatters import (
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)

APP_NAME = "notification-engine"

# boto and urllib3 log every request at INFO/DEBUG
QUIET_LOGGERS = ("boto3", "botocore", "urllib3")


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _build_processors(app_version: str, json_output: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        add_app_info(APP_NAME, app_version),
        mask_sensitive_data(),
        truncate_large_values(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog and the root logger.

    Args:
        log_level: Overrides ``LOG_LEVEL``
        is_production: Overrides ``Settings.is_production`` (JSON output)

    Returns:
        A bound logger

    Under pytest everything below CRITICAL is dropped and settings are not
    read.
    """
    if _is_test_environment():
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", level=logging.CRITICAL + 1, force=True)
        return structlog.stdlib.get_logger()

    settings = Settings()
    json_output = settings.is_production if is_production is None else is_production
    level_name = (log_level or settings.LOG_LEVEL).upper()

    structlog.configure(
        processors=_build_processors(settings.GIT_SHA, json_output),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name, logging.INFO),
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    Example:
        # in infrastructure/resilience/circuit_breaker.py
        logger = get_module_logger()
        # binds component="circuit_breaker",
        #       module_path="infrastructure.resilience.circuit_breaker"
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module = inspect.getmodule(caller) if caller is not None else None
    if module is None:
        return logger.bind(component="unknown")
    return logger.bind(
        component=module.__name__.rsplit(".", 1)[-1],
        module_path=module.__name__,
    )
