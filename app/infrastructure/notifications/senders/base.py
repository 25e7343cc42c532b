"""Channel sender abstract base class.

A sender delivers one message to one destination through one vendor. All
senders share the same contract: ``send`` never raises. Vendor errors,
timeouts, open circuit breakers and unexpected exceptions all come back as
an error OperationResult so the dispatcher can fail over to the next
channel.
"""

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

import structlog

from infrastructure.notifications.models import ChannelType, NotificationChannel
from infrastructure.operations import OperationResult, OperationStatus
from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
    register_circuit_breaker,
)

if TYPE_CHECKING:
    from infrastructure.configuration import NotificationSettings

logger = structlog.get_logger()

# Failures that say something about the vendor, not about the destination
BREAKER_FAILURE_STATUSES = (
    OperationStatus.TRANSIENT_ERROR,
    OperationStatus.UNAUTHORIZED,
)


def is_transport_failure(result: object) -> bool:
    return (
        isinstance(result, OperationResult)
        and result.status in BREAKER_FAILURE_STATUSES
    )


def create_sender_breaker(
    name: str, settings: "NotificationSettings"
) -> Optional[CircuitBreaker]:
    """Build and register the breaker for one sender, if enabled."""
    if not settings.circuit_breaker_enabled:
        return None
    breaker = CircuitBreaker(
        name=name,
        failure_threshold=settings.circuit_failure_threshold,
        timeout_seconds=settings.circuit_timeout_seconds,
        is_failure=is_transport_failure,
    )
    register_circuit_breaker(breaker)
    return breaker


class ChannelSender(ABC):
    """Abstract base class for channel senders.

    Subclasses implement ``_send`` (the vendor call) and ``health_check``.

    Example Implementation:
        class PagerSender(ChannelSender):

            @property
            def channel_type(self) -> ChannelType:
                return ChannelType.SMS

            def _send(self, channel, subject, body) -> OperationResult:
                return self._client.page(channel.channel_value, body)

            def health_check(self) -> OperationResult:
                return OperationResult.success()
    """

    def __init__(self, circuit_breaker: Optional[CircuitBreaker] = None):
        self._circuit_breaker = circuit_breaker

    @property
    @abstractmethod
    def channel_type(self) -> ChannelType:
        """Channel type this sender delivers."""
        pass

    @property
    def circuit_breaker(self) -> Optional[CircuitBreaker]:
        return self._circuit_breaker

    def send(
        self, channel: NotificationChannel, subject: str, body: str
    ) -> OperationResult:
        """Deliver a message to the channel's destination.

        Args:
            channel: Destination channel (must match channel_type)
            subject: Subject line
            body: Message body

        Returns:
            OperationResult; on success ``data["external_id"]`` holds the
            vendor's message id
        """
        if channel.channel_type != self.channel_type:
            return OperationResult.permanent_error(
                f"{self.channel_type.value} sender cannot deliver to "
                f"{channel.channel_type.value} channel",
                error_code="CHANNEL_TYPE_MISMATCH",
            )

        try:
            if self._circuit_breaker is not None:
                result = self._circuit_breaker.call(
                    self._send, channel=channel, subject=subject, body=body
                )
            else:
                result = self._send(channel=channel, subject=subject, body=body)
        except CircuitBreakerOpenError as e:
            return OperationResult.transient_error(str(e), error_code="CIRCUIT_OPEN")
        except Exception as e:
            logger.error(
                "channel_send_error",
                channel_type=self.channel_type.value,
                channel_id=channel.channel_id,
                error=str(e),
                exc_info=True,
            )
            return OperationResult.transient_error(
                f"{self.channel_type.value} send error: {str(e)}",
                error_code="SEND_ERROR",
            )

        if result.is_success:
            logger.info(
                "channel_send_succeeded",
                channel_type=self.channel_type.value,
                channel_id=channel.channel_id,
            )
        else:
            logger.warning(
                "channel_send_failed",
                channel_type=self.channel_type.value,
                channel_id=channel.channel_id,
                error=result.message,
                error_code=result.error_code,
            )
        return result

    @abstractmethod
    def _send(
        self, channel: NotificationChannel, subject: str, body: str
    ) -> OperationResult:
        """Vendor call. May raise; ``send`` converts exceptions."""
        pass

    @abstractmethod
    def health_check(self) -> OperationResult:
        """Check vendor credentials and reachability."""
        pass
