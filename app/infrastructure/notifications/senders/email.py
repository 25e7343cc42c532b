"""Email sender using Resend."""

from typing import Optional

import structlog

from infrastructure.clients.resend import ResendClient
from infrastructure.notifications.models import ChannelType, NotificationChannel
from infrastructure.notifications.senders.base import ChannelSender
from infrastructure.operations import OperationResult
from infrastructure.resilience.circuit_breaker import CircuitBreaker

logger = structlog.get_logger()


class EmailSender(ChannelSender):
    """Deliver notifications as HTML email through Resend.

    The notification body is sent as the email's HTML content unchanged.
    """

    def __init__(
        self,
        client: ResendClient,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        super().__init__(circuit_breaker)
        self._client = client
        logger.info("initialized_email_sender", backend="resend")

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.EMAIL

    def _send(
        self, channel: NotificationChannel, subject: str, body: str
    ) -> OperationResult:
        result = self._client.send_email(
            to=channel.channel_value, subject=subject, html=body
        )
        if not result.is_success:
            return result
        return OperationResult.success(
            data={"external_id": (result.data or {}).get("id")},
            message="Email sent via Resend",
        )

    def health_check(self) -> OperationResult:
        return self._client.check_domains()
