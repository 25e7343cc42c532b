"""Notification delivery models.

Pydantic models for user contact channels, delivery requests, per-channel
attempts and the durable delivery record.

Uses Pydantic BaseModel for:
- RFC 5322 email validation (EmailStr via TypeAdapter)
- E.164 validation for SMS and WhatsApp destinations
- Frozen audit models (DeliveryAttempt, DeliveryRecord)
"""

import re
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from infrastructure.idempotency.key_builder import IdempotencyKeyBuilder
from infrastructure.notifications.exceptions import (
    AllChannelsExhaustedError,
    NoChannelsConfiguredError,
)

E164_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")
PHONE_PUNCTUATION = re.compile(r"[\s\-().]")

_email_adapter = TypeAdapter(EmailStr)
_record_keys = IdempotencyKeyBuilder(namespace="notification_delivery")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChannelType(Enum):
    """Delivery channel kinds."""

    EMAIL = "email"
    SMS = "sms"
    WHATSAPP = "whatsapp"


class AttemptStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


class DeliveryStatus(Enum):
    DELIVERED = "delivered"
    FAILED = "failed"


class FailureReason(Enum):
    """Why a delivery ended without reaching the user."""

    NO_CHANNELS_CONFIGURED = "no_channels_configured"
    ALL_CHANNELS_EXHAUSTED = "all_channels_exhausted"


class NotificationChannel(BaseModel):
    """A verified-or-pending contact method belonging to a user.

    Attributes:
        channel_id: Stable identifier
        user_id: Owner
        channel_type: email, sms or whatsapp
        channel_value: Destination (email address or E.164 number)
        is_verified: Ownership confirmed; only verified channels are attempted
        is_primary: Attempted first
        created_at: Insertion time, used as the secondary ordering key

    Example:
        channel = NotificationChannel(
            user_id="user-1",
            channel_type=ChannelType.SMS,
            channel_value="+15551234567",
            is_verified=True,
        )
    """

    channel_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str = Field(..., min_length=1)
    channel_type: ChannelType
    channel_value: str
    is_verified: bool = False
    is_primary: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("channel_value")
    @classmethod
    def validate_destination(cls, v: str, info: ValidationInfo) -> str:
        """Normalize and validate channel_value for its channel_type."""
        value = v.strip()
        channel_type = info.data.get("channel_type")
        if channel_type == ChannelType.EMAIL:
            try:
                value = str(_email_adapter.validate_python(value)).lower()
            except ValidationError as e:
                raise ValueError(f"Invalid email address: {value}") from e
        else:
            value = PHONE_PUNCTUATION.sub("", value)
            if not E164_PATTERN.match(value):
                raise ValueError(f"Phone number must be in E.164 format: {value}")
        return value

    @property
    def dedupe_key(self) -> Tuple[ChannelType, str]:
        return (self.channel_type, self.channel_value)


class NotificationRequest(BaseModel):
    """Ask to notify one user.

    Attributes:
        user_id: Recipient user
        subject: Email subject, prefixed to SMS/WhatsApp bodies
        message: Body (HTML for email, plain text elsewhere)
        notification_type: Free-form tag (e.g. "insurance_reminder")
        metadata: Extra context persisted with the delivery record
        idempotency_key: Optional caller key that suppresses duplicate sends
    """

    user_id: str = Field(..., min_length=1)
    subject: str
    message: str
    notification_type: str = Field(..., min_length=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    idempotency_key: Optional[str] = None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Ensure message is not empty."""
        if not v or not v.strip():
            raise ValueError("Notification message cannot be empty")
        return v


class DeliveryAttempt(BaseModel):
    """Outcome of one send through one channel."""

    model_config = ConfigDict(frozen=True)

    channel: ChannelType
    status: AttemptStatus
    channel_id: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    external_id: Optional[str] = None
    attempted_at: datetime = Field(default_factory=utcnow)

    @property
    def is_success(self) -> bool:
        return self.status == AttemptStatus.SUCCESS


class DeliveryRecord(BaseModel):
    """Durable, append-only audit entry for one delivery request.

    Invariants:
        - delivered records end with exactly one successful attempt
        - failed records carry a failure_reason and no successful attempt
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    notification_type: str
    delivery_status: DeliveryStatus
    channels_attempted: List[DeliveryAttempt] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    failure_reason: Optional[FailureReason] = None
    created_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def validate_outcome(self) -> "DeliveryRecord":
        successes = [i for i, a in enumerate(self.channels_attempted) if a.is_success]
        if self.delivery_status == DeliveryStatus.DELIVERED:
            if successes != [len(self.channels_attempted) - 1]:
                raise ValueError(
                    "Delivered record must end with its only successful attempt"
                )
            if self.failure_reason is not None:
                raise ValueError("Delivered record cannot carry a failure reason")
        else:
            if successes:
                raise ValueError("Failed record cannot contain a successful attempt")
            if self.failure_reason is None:
                raise ValueError("Failed record requires a failure reason")
        return self

    @property
    def record_key(self) -> str:
        """Deterministic storage key; re-recording the same record is a no-op.

        The outcome is part of the key so two different deliveries stamped at
        the same instant never collapse into one entry.
        """
        outcome = self.model_dump(
            mode="json",
            include={"delivery_status", "failure_reason", "channels_attempted", "metadata"},
        )
        return _record_keys.build(
            "record",
            user_id=self.user_id,
            notification_type=self.notification_type,
            created_at=self.created_at.isoformat(),
            outcome=outcome,
        )

    @property
    def delivered_via(self) -> Optional[ChannelType]:
        if self.delivery_status == DeliveryStatus.DELIVERED:
            return self.channels_attempted[-1].channel
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json")
        data["record_key"] = self.record_key
        return data


class DeliveryResult(BaseModel):
    """Structured outcome returned to callers of the delivery engine.

    Attributes:
        success: True when some channel accepted the message
        delivered_via: Channel type that succeeded
        delivery_log: Attempts in the order they were made
        failure_reason: Set when success is False
        error: Human-readable failure summary
        record_key: Key of the persisted DeliveryRecord
        record_persisted: False when the audit write failed
        replayed: True when served from the idempotency cache
    """

    success: bool
    delivered_via: Optional[ChannelType] = None
    delivery_log: List[DeliveryAttempt] = Field(default_factory=list)
    failure_reason: Optional[FailureReason] = None
    error: Optional[str] = None
    record_key: Optional[str] = None
    record_persisted: bool = True
    replayed: bool = False

    @classmethod
    def from_record(
        cls, record: DeliveryRecord, record_persisted: bool = True
    ) -> "DeliveryResult":
        error = None
        if record.failure_reason == FailureReason.NO_CHANNELS_CONFIGURED:
            error = "No notification channels configured"
        elif record.failure_reason == FailureReason.ALL_CHANNELS_EXHAUSTED:
            error = "All notification channels failed"
        return cls(
            success=record.delivery_status == DeliveryStatus.DELIVERED,
            delivered_via=record.delivered_via,
            delivery_log=list(record.channels_attempted),
            failure_reason=record.failure_reason,
            error=error,
            record_key=record.record_key,
            record_persisted=record_persisted,
        )

    def raise_for_failure(self, user_id: str) -> None:
        """Raise the typed exception matching failure_reason, if any.

        Raises:
            NoChannelsConfiguredError: The user has no verified channel
            AllChannelsExhaustedError: Every channel failed
        """
        if self.success:
            return
        if self.failure_reason == FailureReason.NO_CHANNELS_CONFIGURED:
            raise NoChannelsConfiguredError(user_id)
        raise AllChannelsExhaustedError(user_id, attempts=self.delivery_log)
