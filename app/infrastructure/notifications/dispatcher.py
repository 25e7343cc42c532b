"""Notification dispatcher with primary-first failover.

Delivers one notification to one user:
- Resolves the user's verified channels (primary first)
- Tries them one at a time, stopping at the first success
- Records every attempt, then persists one DeliveryRecord per request
- Optionally suppresses duplicate sends with an idempotency cache

States:
    Idle -> Rejected                      (no verified channels)
    Idle -> Attempting(0) -> ... -> Delivered
    Idle -> Attempting(0) -> ... -> Exhausted

Channels are never tried in parallel and a failed channel is not retried;
failover is by moving to the next channel.

Usage Example:
    from infrastructure.notifications import (
        NotificationDispatcher,
        NotificationRequest,
    )

    dispatcher = NotificationDispatcher(
        registry=registry,
        senders={ChannelType.EMAIL: email_sender, ChannelType.SMS: sms_sender},
        delivery_log=delivery_log,
    )

    result = dispatcher.send(
        NotificationRequest(
            user_id="user-1",
            subject="Insurance verification",
            message="Your insurance expires in 7 days.",
            notification_type="insurance_reminder",
        )
    )
    if not result.success:
        logger.warning("notification_not_delivered", reason=result.failure_reason)
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional

import structlog

from infrastructure.idempotency.cache import IdempotencyCache
from infrastructure.idempotency.key_builder import IdempotencyKeyBuilder
from infrastructure.logging.context import bind_delivery_context
from infrastructure.notifications.models import (
    AttemptStatus,
    ChannelType,
    DeliveryAttempt,
    DeliveryRecord,
    DeliveryResult,
    DeliveryStatus,
    FailureReason,
    NotificationChannel,
    NotificationRequest,
    utcnow,
)
from infrastructure.notifications.registry import ChannelRegistry
from infrastructure.notifications.senders.base import ChannelSender
from infrastructure.notifications.stores.delivery_log import DeliveryLogStore

logger = structlog.get_logger()

_send_keys = IdempotencyKeyBuilder(namespace="notification_send")


class NotificationDispatcher:
    """Multi-channel notification dispatcher.

    Attributes:
        registry: ChannelRegistry resolving a user's channels
        senders: Dict mapping ChannelType to its ChannelSender
        delivery_log: DeliveryLogStore receiving one record per request
        idempotency_cache: Optional cache to prevent duplicate sends
        idempotency_ttl_seconds: TTL for idempotency cache entries

    Example:
        dispatcher = NotificationDispatcher(
            registry=ChannelRegistry(InMemoryChannelStore()),
            senders={ChannelType.EMAIL: EmailSender(resend_client)},
            delivery_log=InMemoryDeliveryLogStore(),
        )
    """

    def __init__(
        self,
        registry: ChannelRegistry,
        senders: Dict[ChannelType, ChannelSender],
        delivery_log: DeliveryLogStore,
        idempotency_cache: Optional[IdempotencyCache] = None,
        idempotency_ttl_seconds: int = 3600,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.registry = registry
        self.senders = senders
        self.delivery_log = delivery_log
        self.idempotency_cache = idempotency_cache
        self.idempotency_ttl_seconds = idempotency_ttl_seconds
        self._clock = clock

        logger.info(
            "initialized_notification_dispatcher",
            senders=[t.value for t in senders],
            idempotency_enabled=idempotency_cache is not None,
        )

    def send(self, request: NotificationRequest) -> DeliveryResult:
        """Deliver a notification through the user's channels.

        Process:
        1. Return the cached result if the idempotency key was already delivered
        2. Resolve channels; none means Rejected with no sends
        3. Attempt channels in order until one succeeds
        4. Persist the DeliveryRecord (always)
        5. Cache delivered results under the idempotency key

        Args:
            request: NotificationRequest to deliver

        Returns:
            DeliveryResult describing the outcome

        Raises:
            ChannelLookupError: The channel store could not be read
        """
        with bind_delivery_context(request.user_id, request.notification_type):
            return self._deliver(request)

    def _deliver(self, request: NotificationRequest) -> DeliveryResult:
        cache_key = self._cache_key(request)
        if cache_key:
            cached = self._check_idempotency_cache(cache_key)
            if cached is not None:
                logger.info(
                    "notification_already_delivered",
                    user_id=request.user_id,
                    notification_type=request.notification_type,
                    delivered_via=cached.delivered_via.value
                    if cached.delivered_via
                    else None,
                )
                return cached

        channels = self.registry.resolve_channels(request.user_id)

        if not channels:
            logger.warning(
                "notification_rejected_no_channels",
                user_id=request.user_id,
                notification_type=request.notification_type,
            )
            record = self._build_record(
                request, [], FailureReason.NO_CHANNELS_CONFIGURED
            )
        else:
            attempts = self._attempt_channels(request, channels)
            reason = (
                None
                if attempts and attempts[-1].is_success
                else FailureReason.ALL_CHANNELS_EXHAUSTED
            )
            record = self._build_record(request, attempts, reason)

        persisted = self._persist(record)
        result = DeliveryResult.from_record(record, record_persisted=persisted)

        if result.success:
            logger.info(
                "notification_delivered",
                user_id=request.user_id,
                notification_type=request.notification_type,
                delivered_via=result.delivered_via.value,
                attempt_count=len(result.delivery_log),
            )
            if cache_key:
                self._cache_result(cache_key, result)
        elif result.failure_reason == FailureReason.ALL_CHANNELS_EXHAUSTED:
            logger.error(
                "notification_channels_exhausted",
                user_id=request.user_id,
                notification_type=request.notification_type,
                channels_tried=[a.channel.value for a in result.delivery_log],
            )

        return result

    def _attempt_channels(
        self, request: NotificationRequest, channels: List[NotificationChannel]
    ) -> List[DeliveryAttempt]:
        """Try channels in order, stopping after the first success."""
        attempts: List[DeliveryAttempt] = []

        for channel in channels:
            attempt = self._attempt(request, channel)
            attempts.append(attempt)
            if attempt.is_success:
                break

            logger.info(
                "notification_failover",
                user_id=request.user_id,
                failed_channel=channel.channel_type.value,
                error_code=attempt.error_code,
                remaining=len(channels) - len(attempts),
            )

        return attempts

    def _attempt(
        self, request: NotificationRequest, channel: NotificationChannel
    ) -> DeliveryAttempt:
        attempted_at = self._clock()
        sender = self.senders.get(channel.channel_type)
        if sender is None:
            logger.warning(
                "sender_not_configured",
                channel_type=channel.channel_type.value,
                available=[t.value for t in self.senders],
            )
            return DeliveryAttempt(
                channel=channel.channel_type,
                channel_id=channel.channel_id,
                status=AttemptStatus.FAILED,
                error=f"No sender configured for {channel.channel_type.value}",
                error_code="SENDER_NOT_CONFIGURED",
                attempted_at=attempted_at,
            )

        # Senders should not raise; guard anyway so one bad sender cannot
        # abort the remaining channels.
        try:
            result = sender.send(channel, request.subject, request.message)
        except Exception as e:
            logger.error(
                "channel_exception",
                channel_type=channel.channel_type.value,
                channel_id=channel.channel_id,
                error=str(e),
                exc_info=True,
            )
            return DeliveryAttempt(
                channel=channel.channel_type,
                channel_id=channel.channel_id,
                status=AttemptStatus.FAILED,
                error=f"Channel exception: {str(e)}",
                error_code="CHANNEL_EXCEPTION",
                attempted_at=attempted_at,
            )

        if result.is_success:
            return DeliveryAttempt(
                channel=channel.channel_type,
                channel_id=channel.channel_id,
                status=AttemptStatus.SUCCESS,
                external_id=(result.data or {}).get("external_id"),
                attempted_at=attempted_at,
            )

        return DeliveryAttempt(
            channel=channel.channel_type,
            channel_id=channel.channel_id,
            status=AttemptStatus.FAILED,
            error=result.message,
            error_code=result.error_code,
            attempted_at=attempted_at,
        )

    def _build_record(
        self,
        request: NotificationRequest,
        attempts: List[DeliveryAttempt],
        failure_reason: Optional[FailureReason],
    ) -> DeliveryRecord:
        return DeliveryRecord(
            user_id=request.user_id,
            notification_type=request.notification_type,
            delivery_status=(
                DeliveryStatus.FAILED if failure_reason else DeliveryStatus.DELIVERED
            ),
            channels_attempted=attempts,
            metadata=request.metadata,
            failure_reason=failure_reason,
            created_at=self._clock(),
        )

    def _persist(self, record: DeliveryRecord) -> bool:
        """Write the record; failures are logged and reported, never raised."""
        try:
            result = self.delivery_log.record(record)
        except Exception as e:
            logger.error(
                "delivery_record_persist_failed",
                record_key=record.record_key,
                user_id=record.user_id,
                delivery_status=record.delivery_status.value,
                error=str(e),
                exc_info=True,
            )
            return False

        if not result.is_success:
            logger.error(
                "delivery_record_persist_failed",
                record_key=record.record_key,
                user_id=record.user_id,
                delivery_status=record.delivery_status.value,
                error=result.message,
                error_code=result.error_code,
            )
            return False
        return True

    def _cache_key(self, request: NotificationRequest) -> Optional[str]:
        if not (request.idempotency_key and self.idempotency_cache):
            return None
        return _send_keys.build(
            "send", user_id=request.user_id, idempotency_key=request.idempotency_key
        )

    def _check_idempotency_cache(self, key: str) -> Optional[DeliveryResult]:
        try:
            cached = self.idempotency_cache.get(key)
            if not cached:
                return None
            result = DeliveryResult.model_validate(cached)
        except Exception as e:
            logger.error(
                "idempotency_cache_error",
                idempotency_key=key,
                error=str(e),
                exc_info=True,
            )
            return None
        return result.model_copy(update={"replayed": True})

    def _cache_result(self, key: str, result: DeliveryResult) -> None:
        try:
            self.idempotency_cache.set(
                key,
                result.model_dump(mode="json"),
                ttl_seconds=self.idempotency_ttl_seconds,
            )
        except Exception as e:
            logger.error(
                "idempotency_cache_set_error",
                idempotency_key=key,
                error=str(e),
                exc_info=True,
            )

    def health_check(self) -> Dict[str, bool]:
        """Check health of all senders.

        Returns:
            Dict mapping channel type value to health status (True=healthy)
        """
        health_status = {}

        for channel_type, sender in self.senders.items():
            try:
                health_status[channel_type.value] = sender.health_check().is_success
            except Exception as e:
                logger.error(
                    "sender_health_check_failed",
                    channel_type=channel_type.value,
                    error=str(e),
                    exc_info=True,
                )
                health_status[channel_type.value] = False

        return health_status
