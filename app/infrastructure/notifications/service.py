"""Notification service for dependency injection.

Wires the channel registry, senders, delivery log and idempotency cache
from settings and exposes the operations callers need: send a
notification, manage a user's channels, read the delivery log.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

import requests

from infrastructure.clients.aws import DynamoDBClient
from infrastructure.clients.resend import ResendClient
from infrastructure.clients.twilio import TwilioClient
from infrastructure.idempotency.cache import IdempotencyCache
from infrastructure.idempotency.factory import create_idempotency_cache
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import (
    ChannelType,
    DeliveryRecord,
    DeliveryResult,
    NotificationChannel,
    NotificationRequest,
)
from infrastructure.notifications.registry import ChannelRegistry
from infrastructure.notifications.senders import (
    ChannelSender,
    EmailSender,
    SMSSender,
    WhatsAppSender,
    create_sender_breaker,
)
from infrastructure.notifications.stores import (
    DeliveryLogStore,
    create_channel_store,
    create_delivery_log_store,
)
from infrastructure.resilience.circuit_breaker import (
    get_all_circuit_breaker_stats,
    get_open_circuit_breakers,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def build_default_senders(
    settings: "Settings", session: Optional[requests.Session] = None
) -> Dict[ChannelType, ChannelSender]:
    """Create one sender per channel type from vendor settings.

    Args:
        settings: Application settings
        session: Optional shared requests.Session for vendor calls

    Returns:
        Dict mapping ChannelType to its sender
    """
    feature = settings.notifications
    timeout = feature.transport_timeout_seconds
    resend = ResendClient(settings.resend, timeout_seconds=timeout, session=session)
    twilio = TwilioClient(settings.twilio, timeout_seconds=timeout, session=session)

    return {
        ChannelType.EMAIL: EmailSender(
            resend,
            circuit_breaker=create_sender_breaker("notification_email", feature),
        ),
        ChannelType.SMS: SMSSender(
            twilio,
            from_number=settings.twilio.TWILIO_PHONE_NUMBER,
            max_length=feature.sms_max_length,
            circuit_breaker=create_sender_breaker("notification_sms", feature),
        ),
        ChannelType.WHATSAPP: WhatsAppSender(
            twilio,
            from_number=settings.twilio.whatsapp_sender,
            max_length=feature.sms_max_length,
            circuit_breaker=create_sender_breaker("notification_whatsapp", feature),
        ),
    }


class NotificationService:
    """Class-based notification service.

    Thin facade over NotificationDispatcher and ChannelRegistry. Anything
    not passed in is built from settings.

    Usage:
        # Via dependency injection
        from infrastructure.services import NotificationServiceDep

        @router.post("/notify")
        def notify(service: NotificationServiceDep, body: NotificationRequest):
            return service.send(body)

        # Direct instantiation
        from infrastructure.services import get_settings

        service = NotificationService(get_settings())
        result = service.send_notification(
            user_id="user-1",
            subject="Waitlist slot available",
            message="A slot opened tomorrow at 10:00.",
            notification_type="waitlist_offer",
        )
    """

    def __init__(
        self,
        settings: "Settings",
        registry: Optional[ChannelRegistry] = None,
        senders: Optional[Dict[ChannelType, ChannelSender]] = None,
        delivery_log: Optional[DeliveryLogStore] = None,
        idempotency_cache: Optional[IdempotencyCache] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
    ):
        """Initialize notification service.

        Args:
            settings: Settings instance (required, passed from provider).
            registry: Optional ChannelRegistry; built from settings if omitted.
            senders: Optional senders by channel type; built from settings.
            delivery_log: Optional DeliveryLogStore; built from settings.
            idempotency_cache: Optional cache; built from settings.
            dispatcher: Optional pre-configured dispatcher. When given, its
                registry and delivery log are used.
        """
        self._settings = settings

        if dispatcher is None:
            dynamodb_client = None
            if (
                settings.notifications.backend == "dynamodb"
                or settings.idempotency.IDEMPOTENCY_BACKEND == "dynamodb"
            ):
                dynamodb_client = DynamoDBClient(settings.aws)

            if registry is None:
                registry = ChannelRegistry(
                    create_channel_store(settings, dynamodb_client=dynamodb_client)
                )
            if delivery_log is None:
                delivery_log = create_delivery_log_store(
                    settings, dynamodb_client=dynamodb_client
                )
            if senders is None:
                senders = build_default_senders(settings)
            if idempotency_cache is None:
                idempotency_cache = create_idempotency_cache(
                    settings, dynamodb_client=dynamodb_client
                )

            dispatcher = NotificationDispatcher(
                registry=registry,
                senders=senders,
                delivery_log=delivery_log,
                idempotency_cache=idempotency_cache,
                idempotency_ttl_seconds=settings.idempotency.IDEMPOTENCY_TTL_SECONDS,
            )

        self._dispatcher = dispatcher

    def send(self, request: NotificationRequest) -> DeliveryResult:
        """Deliver a notification with primary-first failover."""
        return self._dispatcher.send(request)

    def send_notification(
        self,
        user_id: str,
        subject: str,
        message: str,
        notification_type: str,
        metadata: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> DeliveryResult:
        """Convenience wrapper used by feature code.

        Example:
            result = service.send_notification(
                user_id, "Price change", body, "price_change_notice"
            )
            result.raise_for_failure(user_id)
        """
        request = NotificationRequest(
            user_id=user_id,
            subject=subject,
            message=message,
            notification_type=notification_type,
            metadata=metadata or {},
            idempotency_key=idempotency_key,
        )
        return self.send(request)

    # Channel management

    def list_channels(self, user_id: str) -> List[NotificationChannel]:
        return self.registry.list_channels(user_id)

    def resolve_channels(self, user_id: str) -> List[NotificationChannel]:
        return self.registry.resolve_channels(user_id)

    def add_channel(
        self, user_id: str, channel_type: ChannelType, channel_value: str
    ) -> NotificationChannel:
        return self.registry.add_channel(user_id, channel_type, channel_value)

    def verify_channel(self, user_id: str, channel_id: str) -> NotificationChannel:
        return self.registry.verify_channel(user_id, channel_id)

    def set_primary(self, user_id: str, channel_id: str) -> NotificationChannel:
        return self.registry.set_primary(user_id, channel_id)

    def deactivate_channel(self, user_id: str, channel_id: str) -> NotificationChannel:
        return self.registry.deactivate_channel(user_id, channel_id)

    # Delivery log

    def list_deliveries(
        self, user_id: str, limit: Optional[int] = None
    ) -> List[DeliveryRecord]:
        limit = limit or self._settings.notifications.delivery_list_limit
        return self._dispatcher.delivery_log.list_for_user(user_id, limit=limit)

    def get_delivery(self, record_key: str) -> Optional[DeliveryRecord]:
        return self._dispatcher.delivery_log.get(record_key)

    # Health

    def health_check(self) -> Dict[str, Any]:
        """Per-sender health plus circuit breaker state."""
        senders = self._dispatcher.health_check()
        return {
            "healthy": all(senders.values()) if senders else False,
            "senders": senders,
            "circuit_breakers": get_all_circuit_breaker_stats(),
            "open_circuit_breakers": get_open_circuit_breakers(),
        }

    @property
    def registry(self) -> ChannelRegistry:
        return self._dispatcher.registry

    @property
    def dispatcher(self) -> NotificationDispatcher:
        """Access underlying NotificationDispatcher instance."""
        return self._dispatcher
