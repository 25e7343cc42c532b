"""Infrastructure modules for the notification engine.

Centralized infrastructure components:
- configuration: Settings management (Settings, NotificationSettings)
- logging: Structured logging (get_module_logger, logger)
- operations: Operation results and error classification
- clients: Vendor and AWS clients (Twilio, Resend, DynamoDB)
- idempotency: Idempotency cache
- resilience: Circuit breakers
- notifications: Channel registry, senders, dispatcher and delivery log
- services: Dependency injection services (SettingsDep, NotificationServiceDep)
"""

# Configuration
from infrastructure.configuration import Settings

# Logging
from infrastructure.logging import get_module_logger, logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    # Configuration
    "Settings",
    # Logging
    "get_module_logger",
    "logger",
    # Operations
    "OperationResult",
    "OperationStatus",
]
