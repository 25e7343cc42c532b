"""Unit tests for notification models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from infrastructure.notifications.exceptions import (
    AllChannelsExhaustedError,
    NoChannelsConfiguredError,
)
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
)

CREATED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _attempt(channel=ChannelType.EMAIL, ok=True):
    return DeliveryAttempt(
        channel=channel,
        status=AttemptStatus.SUCCESS if ok else AttemptStatus.FAILED,
        error=None if ok else "vendor down",
    )


@pytest.mark.unit
class TestNotificationChannel:
    def test_email_is_normalized(self):
        channel = NotificationChannel(
            user_id="user-1",
            channel_type=ChannelType.EMAIL,
            channel_value="  Patient@Example.COM ",
        )

        assert channel.channel_value == "patient@example.com"
        assert channel.is_verified is False
        assert channel.is_primary is False
        assert channel.channel_id

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            NotificationChannel(
                user_id="user-1", channel_type=ChannelType.EMAIL, channel_value="not-an-email"
            )

    @pytest.mark.parametrize("channel_type", [ChannelType.SMS, ChannelType.WHATSAPP])
    @pytest.mark.parametrize(
        "value", ["+1 555-123-4567", "+1 (555) 123-4567", "+1.555.123.4567"]
    )
    def test_phone_numbers_are_normalized(self, channel_type, value):
        channel = NotificationChannel(
            user_id="user-1", channel_type=channel_type, channel_value=value
        )

        assert channel.channel_value == "+15551234567"

    @pytest.mark.parametrize("value", ["5551234567", "+0551234567", "+1555", "phone"])
    def test_non_e164_numbers_rejected(self, value):
        with pytest.raises(ValidationError):
            NotificationChannel(
                user_id="user-1", channel_type=ChannelType.SMS, channel_value=value
            )

    def test_empty_user_rejected(self):
        with pytest.raises(ValidationError):
            NotificationChannel(
                user_id="", channel_type=ChannelType.EMAIL, channel_value="a@example.com"
            )

    def test_dedupe_key(self):
        channel = NotificationChannel(
            user_id="user-1", channel_type=ChannelType.SMS, channel_value="+15551234567"
        )

        assert channel.dedupe_key == (ChannelType.SMS, "+15551234567")


@pytest.mark.unit
class TestNotificationRequest:
    def test_valid_request(self):
        request = NotificationRequest(
            user_id="user-1",
            subject="Hi",
            message="Body",
            notification_type="insurance_reminder",
        )

        assert request.metadata == {}
        assert request.idempotency_key is None

    @pytest.mark.parametrize("message", ["", "   "])
    def test_blank_message_rejected(self, message):
        with pytest.raises(ValidationError, match="cannot be empty"):
            NotificationRequest(
                user_id="user-1", subject="Hi", message=message, notification_type="t"
            )

    def test_missing_notification_type_rejected(self):
        with pytest.raises(ValidationError):
            NotificationRequest(
                user_id="user-1", subject="Hi", message="Body", notification_type=""
            )


@pytest.mark.unit
class TestDeliveryRecord:
    def test_delivered_record(self):
        record = DeliveryRecord(
            user_id="user-1",
            notification_type="insurance_reminder",
            delivery_status=DeliveryStatus.DELIVERED,
            channels_attempted=[_attempt(ChannelType.SMS, ok=False), _attempt()],
            created_at=CREATED_AT,
        )

        assert record.delivered_via == ChannelType.EMAIL

    def test_delivered_record_must_end_with_success(self):
        with pytest.raises(ValidationError):
            DeliveryRecord(
                user_id="user-1",
                notification_type="t",
                delivery_status=DeliveryStatus.DELIVERED,
                channels_attempted=[_attempt(), _attempt(ChannelType.SMS, ok=False)],
            )

    def test_delivered_record_has_only_one_success(self):
        with pytest.raises(ValidationError):
            DeliveryRecord(
                user_id="user-1",
                notification_type="t",
                delivery_status=DeliveryStatus.DELIVERED,
                channels_attempted=[_attempt(), _attempt(ChannelType.SMS)],
            )

    def test_failed_record_requires_reason(self):
        with pytest.raises(ValidationError):
            DeliveryRecord(
                user_id="user-1",
                notification_type="t",
                delivery_status=DeliveryStatus.FAILED,
                channels_attempted=[_attempt(ok=False)],
            )

    def test_failed_record_cannot_contain_success(self):
        with pytest.raises(ValidationError):
            DeliveryRecord(
                user_id="user-1",
                notification_type="t",
                delivery_status=DeliveryStatus.FAILED,
                failure_reason=FailureReason.ALL_CHANNELS_EXHAUSTED,
                channels_attempted=[_attempt()],
            )

    def test_record_key_is_deterministic(self):
        kwargs = dict(
            user_id="user-1",
            notification_type="t",
            delivery_status=DeliveryStatus.FAILED,
            failure_reason=FailureReason.NO_CHANNELS_CONFIGURED,
            created_at=CREATED_AT,
        )

        first = DeliveryRecord(**kwargs)
        second = DeliveryRecord(**kwargs)
        later = DeliveryRecord(**{**kwargs, "created_at": datetime(2026, 3, 2, tzinfo=timezone.utc)})

        assert first.record_key == second.record_key
        assert first.record_key.startswith("notification_delivery:record:")
        assert later.record_key != first.record_key

    def test_record_key_depends_on_outcome(self):
        delivered = DeliveryRecord(
            user_id="user-1",
            notification_type="t",
            delivery_status=DeliveryStatus.DELIVERED,
            channels_attempted=[_attempt()],
            created_at=CREATED_AT,
        )
        rejected = DeliveryRecord(
            user_id="user-1",
            notification_type="t",
            delivery_status=DeliveryStatus.FAILED,
            failure_reason=FailureReason.NO_CHANNELS_CONFIGURED,
            created_at=CREATED_AT,
        )

        assert delivered.record_key != rejected.record_key

    def test_records_are_immutable(self):
        record = DeliveryRecord(
            user_id="user-1",
            notification_type="t",
            delivery_status=DeliveryStatus.FAILED,
            failure_reason=FailureReason.NO_CHANNELS_CONFIGURED,
        )

        with pytest.raises(ValidationError):
            record.user_id = "user-2"

    def test_to_dict_includes_record_key(self):
        record = DeliveryRecord(
            user_id="user-1",
            notification_type="t",
            delivery_status=DeliveryStatus.FAILED,
            failure_reason=FailureReason.NO_CHANNELS_CONFIGURED,
            created_at=CREATED_AT,
        )

        data = record.to_dict()

        assert data["record_key"] == record.record_key
        assert data["delivery_status"] == "failed"
        assert data["failure_reason"] == "no_channels_configured"


@pytest.mark.unit
class TestDeliveryResult:
    def test_from_failed_record(self):
        record = DeliveryRecord(
            user_id="user-1",
            notification_type="t",
            delivery_status=DeliveryStatus.FAILED,
            failure_reason=FailureReason.ALL_CHANNELS_EXHAUSTED,
            channels_attempted=[_attempt(ok=False)],
        )

        result = DeliveryResult.from_record(record, record_persisted=False)

        assert result.success is False
        assert result.error == "All notification channels failed"
        assert result.record_key == record.record_key
        assert result.record_persisted is False

    def test_raise_for_failure_no_channels(self):
        result = DeliveryResult(
            success=False, failure_reason=FailureReason.NO_CHANNELS_CONFIGURED
        )

        with pytest.raises(NoChannelsConfiguredError) as exc_info:
            result.raise_for_failure("user-1")

        assert exc_info.value.user_id == "user-1"

    def test_raise_for_failure_exhausted(self):
        attempts = [_attempt(ok=False)]
        result = DeliveryResult(
            success=False,
            failure_reason=FailureReason.ALL_CHANNELS_EXHAUSTED,
            delivery_log=attempts,
        )

        with pytest.raises(AllChannelsExhaustedError) as exc_info:
            result.raise_for_failure("user-1")

        assert exc_info.value.attempts == attempts

    def test_raise_for_failure_on_success_is_noop(self):
        DeliveryResult(success=True, delivered_via=ChannelType.EMAIL).raise_for_failure("user-1")
