"""SMS sender using Twilio."""

from typing import Optional

import structlog

from infrastructure.clients.twilio import TwilioClient
from infrastructure.notifications.models import ChannelType, NotificationChannel
from infrastructure.notifications.senders.base import ChannelSender
from infrastructure.operations import OperationResult
from infrastructure.resilience.circuit_breaker import CircuitBreaker

logger = structlog.get_logger()

TRUNCATION_SUFFIX = "..."


class SMSSender(ChannelSender):
    """Deliver notifications as SMS through Twilio.

    The subject and body are joined by a blank line. Bodies longer than
    ``max_length`` are cut and end with ``...``.

    Args:
        client: TwilioClient
        from_number: E.164 sender number
        max_length: Maximum composed message length
        circuit_breaker: Optional breaker guarding the vendor call
    """

    def __init__(
        self,
        client: TwilioClient,
        from_number: Optional[str],
        max_length: int = 1600,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        super().__init__(circuit_breaker)
        self._client = client
        self._from_number = from_number
        self._max_length = max_length
        logger.info(
            "initialized_sender",
            channel_type=self.channel_type.value,
            backend="twilio",
        )

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.SMS

    def compose(self, subject: str, body: str) -> str:
        """Build the message text sent to the handset."""
        text = f"{subject}\n\n{body}" if subject else body
        if len(text) > self._max_length:
            logger.warning(
                "message_truncated",
                channel_type=self.channel_type.value,
                original_length=len(text),
                max_length=self._max_length,
            )
            text = text[: self._max_length - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX
        return text

    def destination(self, channel: NotificationChannel) -> str:
        return channel.channel_value

    def sender_address(self) -> Optional[str]:
        return self._from_number

    def _send(
        self, channel: NotificationChannel, subject: str, body: str
    ) -> OperationResult:
        from_ = self.sender_address()
        if not from_:
            return OperationResult.permanent_error(
                f"No {self.channel_type.value} sender number configured",
                error_code="TRANSPORT_NOT_CONFIGURED",
            )

        result = self._client.send_message(
            to=self.destination(channel),
            body=self.compose(subject, body),
            from_=from_,
        )
        if not result.is_success:
            return result
        return OperationResult.success(
            data={"external_id": (result.data or {}).get("sid")},
            message=f"{self.channel_type.value} sent via Twilio",
        )

    def health_check(self) -> OperationResult:
        return self._client.check_account()
